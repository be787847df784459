"""
Workout plan aggregate.

Part of FL-2: Define workout domain models
Updated in FL-9: Tagged rep/timed targets

A WorkoutPlan is one day's generated session for one profile. Each of its
exercises carries a prescription whose target is either a rep count or a
duration, never both.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from domain.models.exercise import ExerciseRecord


class Feedback(str, Enum):
    """Post-workout difficulty feedback."""

    TOO_EASY = "too_easy"
    JUST_RIGHT = "just_right"
    TOO_HARD = "too_hard"


class RepTarget(BaseModel):
    """Rep-based prescription."""

    kind: Literal["reps"] = "reps"
    reps: int = Field(..., ge=1)


class TimedTarget(BaseModel):
    """Time-based prescription."""

    kind: Literal["timed"] = "timed"
    duration_seconds: int = Field(..., ge=1)


WorkoutTarget = Annotated[Union[RepTarget, TimedTarget], Field(discriminator="kind")]


class CompletedSet(BaseModel):
    """A set logged by the workout player."""

    reps: int = Field(default=0, ge=0, description="Reps or seconds performed")
    weight: Optional[float] = Field(default=None, ge=0)
    done: bool = False


class WorkoutExercise(ExerciseRecord):
    """An exercise with its per-session prescription."""

    model_config = ConfigDict(frozen=False)

    sets: int = Field(..., ge=1)
    target: WorkoutTarget
    rest_seconds: int = Field(..., ge=0)
    completed_sets: List[CompletedSet] = Field(default_factory=list)

    @property
    def reps(self) -> Optional[int]:
        """Rep count, or None for timed exercises."""
        if isinstance(self.target, RepTarget):
            return self.target.reps
        return None

    def effort_seconds(self, seconds_per_rep: int) -> int:
        """Working time of a single set."""
        if isinstance(self.target, TimedTarget):
            return self.target.duration_seconds
        return self.target.reps * seconds_per_rep


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutPlan(BaseModel):
    """A generated workout for one profile on one date."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    profile_id: str
    generated_at: datetime = Field(default_factory=_utcnow)
    date: str = Field(..., description="ISO date (YYYY-MM-DD)")
    difficulty_tier: int = Field(..., ge=1, le=5)
    environment: str
    accessories: List[str] = Field(default_factory=list)
    exercises: List[WorkoutExercise] = Field(default_factory=list)
    estimated_duration_minutes: int = Field(..., ge=0)
    completed: bool = False
    feedback: Optional[Feedback] = None
