"""
Domain layer for the FitLife workout API.

This package contains pure domain models that are independent of
infrastructure concerns (storage backends, HTTP, the exercise catalog).

Part of FL-2: Define workout domain models
"""

from domain.models import (
    ExerciseRecord,
    Profile,
    ProgressionState,
    WorkoutExercise,
    WorkoutPlan,
)

__all__ = [
    "ExerciseRecord",
    "Profile",
    "ProgressionState",
    "WorkoutExercise",
    "WorkoutPlan",
]
