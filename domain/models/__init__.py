"""
Domain models for the FitLife workout API.

This package contains pure domain models that are independent of
infrastructure concerns (storage backends, HTTP, the exercise catalog).

These models represent the core concepts:
- Profile: The caller-owned family member profile
- ExerciseRecord: A normalized catalog exercise
- WorkoutPlan: One day's generated workout, made of WorkoutExercises
- ProgressionState: XP, streaks, badges and adaptive difficulty

Part of FL-2: Define workout domain models

Usage:
    >>> from domain.models import WorkoutPlan, ProgressionState

    >>> state = ProgressionState(profile_id="p-1")
    >>> state.level
    1

    >>> # Serialize for storage
    >>> payload = state.model_dump(mode="json")

    >>> # Deserialize
    >>> ProgressionState.model_validate(payload).xp
    0
"""

from domain.models.exercise import (
    EquipmentItem,
    ExerciseCategory,
    ExerciseRecord,
    Muscle,
    Provenance,
)
from domain.models.profile import (
    DEFAULT_ENVIRONMENT,
    Environment,
    FitnessLevel,
    Profile,
    SessionOverride,
)
from domain.models.progression import (
    BadgeState,
    CompletionResult,
    HistoryEntry,
    ProgressionState,
    level_for_xp,
)
from domain.models.workout import (
    CompletedSet,
    Feedback,
    RepTarget,
    TimedTarget,
    WorkoutExercise,
    WorkoutPlan,
    WorkoutTarget,
)

__all__ = [
    # Exercise
    "EquipmentItem",
    "ExerciseCategory",
    "ExerciseRecord",
    "Muscle",
    "Provenance",
    # Profile
    "DEFAULT_ENVIRONMENT",
    "Environment",
    "FitnessLevel",
    "Profile",
    "SessionOverride",
    # Progression
    "BadgeState",
    "CompletionResult",
    "HistoryEntry",
    "ProgressionState",
    "level_for_xp",
    # Workout
    "CompletedSet",
    "Feedback",
    "RepTarget",
    "TimedTarget",
    "WorkoutExercise",
    "WorkoutPlan",
    "WorkoutTarget",
]
