"""
Progression state models.

Part of FL-11: Gamification engine

Per-profile progression: experience points, streaks, badges, the adaptive
difficulty modifier and a bounded history of completed workouts.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from domain.models.workout import Feedback

XP_PER_LEVEL = 200
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 5.0
DEFAULT_DIFFICULTY = 2.0
HISTORY_LIMIT = 90


def level_for_xp(xp: int) -> int:
    """Level derived from total XP."""
    return xp // XP_PER_LEVEL + 1


class BadgeState(BaseModel):
    """Unlock state of one badge. Unlocking is one-way."""

    id: str
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None


class HistoryEntry(BaseModel):
    """A completed workout as recorded in progression history."""

    date: str
    xp_earned: int
    completed: bool = True
    feedback: Optional[Feedback] = None
    environment: Optional[str] = None
    difficulty_tier: int = Field(default=2, ge=1, le=5)


class ProgressionState(BaseModel):
    """Gamification data for a single profile."""

    profile_id: str
    xp: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    longest_streak_days: int = Field(default=0, ge=0)
    last_workout_date: Optional[str] = None
    difficulty_modifier: float = Field(
        default=DEFAULT_DIFFICULTY, ge=MIN_DIFFICULTY, le=MAX_DIFFICULTY
    )
    badges: List[BadgeState] = Field(default_factory=list)
    history: List[HistoryEntry] = Field(default_factory=list)

    @computed_field
    @property
    def level(self) -> int:
        return level_for_xp(self.xp)


class CompletionResult(BaseModel):
    """Outcome of recording a completed workout."""

    progression: ProgressionState
    newly_unlocked_badges: List[BadgeState] = Field(default_factory=list)
    xp_earned: int
    leveled_up: bool
    new_level: int
