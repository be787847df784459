"""
Fake implementations for testing.

Part of FL-1: Test scaffold
Updated in FL-6: Added exercise catalog fakes
Updated in FL-11: Added plan builder

This package provides in-memory fake implementations of the application
ports for fast, isolated testing without network or database access.
"""

from tests.fakes.clock import FrozenClock
from tests.fakes.exercise_catalog import (
    FailingExerciseCatalog,
    FakeExerciseCatalog,
    HangingExerciseCatalog,
    make_wger_exercise,
)
from tests.fakes.key_value_store import FailingKeyValueStore
from tests.fakes.plans import make_workout_plan

__all__ = [
    "FrozenClock",
    "FakeExerciseCatalog",
    "FailingExerciseCatalog",
    "HangingExerciseCatalog",
    "make_wger_exercise",
    "FailingKeyValueStore",
    "make_workout_plan",
]
