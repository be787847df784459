"""
Gamification engine: XP, streaks, badges and adaptive difficulty.

Part of FL-11: Gamification engine

Recording a completed workout:
1. Update the streak from the completion date
2. Award XP (base + per exercise + per difficulty tier + feedback bonus),
   scaled by a streak multiplier capped at 2x
3. Append a history entry (last 90 kept)
4. Adjust the difficulty modifier from the feedback
5. Unlock badges

All steps run on one in-memory state that is saved once at the end.
"""

import logging
from datetime import date as date_type
from datetime import datetime
from typing import Callable, Optional

from backend.core.badges import BadgeContext, backfill_badges, evaluate_badges, initial_badges
from backend.core.plan_generator import round_half_up
from domain.models import (
    CompletionResult,
    Feedback,
    HistoryEntry,
    ProgressionState,
    WorkoutPlan,
    level_for_xp,
)
from domain.models.progression import HISTORY_LIMIT, MAX_DIFFICULTY, MIN_DIFFICULTY
from infrastructure.cache_store import CacheStore, utc_now

logger = logging.getLogger(__name__)

BASE_XP = 50
XP_PER_EXERCISE = 5
XP_PER_TIER = 10
JUST_RIGHT_BONUS = 10
STREAK_BONUS_PER_DAY = 0.05
MAX_STREAK_MULTIPLIER = 2.0

FEEDBACK_ADJUSTMENT = {
    Feedback.TOO_EASY: 0.5,
    Feedback.JUST_RIGHT: 0.0,
    Feedback.TOO_HARD: -0.5,
}


def calculate_xp(
    exercise_count: int,
    difficulty_tier: int,
    feedback: Optional[Feedback],
    streak_days: int,
) -> int:
    """
    XP earned for one completed workout.

    Examples:
        >>> calculate_xp(4, 2, None, 1)
        95
        >>> calculate_xp(6, 3, Feedback.JUST_RIGHT, 40)
        240
    """
    base = BASE_XP + XP_PER_EXERCISE * exercise_count + XP_PER_TIER * difficulty_tier
    if feedback == Feedback.JUST_RIGHT:
        base += JUST_RIGHT_BONUS
    multiplier = min(1 + STREAK_BONUS_PER_DAY * streak_days, MAX_STREAK_MULTIPLIER)
    return round_half_up(base * multiplier)


def update_streak(state: ProgressionState, completed_on: date_type) -> ProgressionState:
    """
    Advance the streak for a completion on ``completed_on``.

    Same day keeps the streak, the next day extends it, anything else
    (including a date before the last workout) starts over at 1.
    """
    gap = None
    if state.last_workout_date:
        try:
            gap = (completed_on - date_type.fromisoformat(state.last_workout_date)).days
        except ValueError:
            logger.warning(
                f"Ignoring malformed last workout date '{state.last_workout_date}' "
                f"for {state.profile_id}"
            )

    if gap == 0:
        pass
    elif gap == 1:
        state.streak_days += 1
    else:
        state.streak_days = 1

    state.longest_streak_days = max(state.longest_streak_days, state.streak_days)
    state.last_workout_date = completed_on.isoformat()
    return state


def adjust_difficulty(modifier: float, feedback: Optional[Feedback]) -> float:
    """Apply feedback to the modifier, clamped to [1, 5]."""
    adjustment = FEEDBACK_ADJUSTMENT.get(feedback, 0.0) if feedback else 0.0
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, modifier + adjustment))


class GamificationEngine:
    """Progression bookkeeping on top of the cache store."""

    def __init__(
        self,
        cache: CacheStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._cache = cache
        self._clock = clock or utc_now

    def get_or_init_progression(self, profile_id: str) -> ProgressionState:
        """
        Load a profile's progression, creating and saving a fresh one if absent.

        Badges added to the catalog after the state was first stored are
        appended (locked).
        """
        state = self._cache.load_progression(profile_id)
        if state is not None:
            if backfill_badges(state):
                logger.debug(f"Back-filled badges for {profile_id}")
            return state

        state = ProgressionState(profile_id=profile_id, badges=initial_badges())
        self._cache.save_progression(state)
        logger.info(f"Initialized progression for {profile_id}")
        return state

    def apply_feedback(self, profile_id: str, feedback: Feedback) -> ProgressionState:
        """
        Adjust and save the difficulty modifier without recording a workout.

        Raises:
            PersistenceError: If the state could not be saved
        """
        state = self.get_or_init_progression(profile_id)
        state.difficulty_modifier = adjust_difficulty(state.difficulty_modifier, feedback)
        self._cache.save_progression(state)
        return state

    def complete_workout(
        self,
        profile_id: str,
        plan: WorkoutPlan,
        feedback: Optional[Feedback] = None,
        completed_at: Optional[datetime] = None,
    ) -> CompletionResult:
        """
        Record a completed workout.

        Args:
            profile_id: Profile that completed the workout
            plan: The completed plan
            feedback: Optional difficulty feedback
            completed_at: Completion time; its date drives the streak and
                its hour the early-bird badge. Defaults to now (UTC).

        Returns:
            Updated progression with XP earned, level change and new badges

        Raises:
            PersistenceError: If the state could not be saved
        """
        completed_at = completed_at or self._clock()
        completed_on = completed_at.date()

        state = self.get_or_init_progression(profile_id)
        previous_level = state.level

        update_streak(state, completed_on)

        xp_earned = calculate_xp(
            len(plan.exercises), plan.difficulty_tier, feedback, state.streak_days
        )
        state.xp += xp_earned

        state.history.append(
            HistoryEntry(
                date=completed_on.isoformat(),
                xp_earned=xp_earned,
                completed=True,
                feedback=feedback,
                environment=plan.environment,
                difficulty_tier=plan.difficulty_tier,
            )
        )
        if len(state.history) > HISTORY_LIMIT:
            state.history = state.history[-HISTORY_LIMIT:]

        state.difficulty_modifier = adjust_difficulty(state.difficulty_modifier, feedback)

        newly_unlocked = evaluate_badges(
            state,
            BadgeContext(completed_on=completed_on, workout_hour=completed_at.hour),
            unlocked_at=completed_at,
        )

        self._cache.save_progression(state)

        new_level = level_for_xp(state.xp)
        if newly_unlocked:
            logger.info(
                f"{profile_id} unlocked badges: {', '.join(b.id for b in newly_unlocked)}"
            )

        return CompletionResult(
            progression=state,
            newly_unlocked_badges=newly_unlocked,
            xp_earned=xp_earned,
            leveled_up=new_level > previous_level,
            new_level=new_level,
        )
