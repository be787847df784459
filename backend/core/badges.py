"""
Badge catalog and unlock rules.

Part of FL-11: Gamification engine

Badges are evaluated in catalog order. A rule only runs while its badge is
still locked, so unlocking is one-way.
"""

from dataclasses import dataclass
from datetime import date as date_type
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from domain.models import BadgeState, Feedback, ProgressionState

STREAK_BADGES = {"streak_3": 3, "streak_7": 7, "streak_30": 30}
LEVEL_BADGES = {"level_5": 5, "level_10": 10}

PERFECT_WEEK_DAYS = 7
EARLY_BIRD_HOUR = 8
IRON_WILL_COUNT = 3
EXPLORER_ENVIRONMENTS = 3


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    icon: str
    description: str


@dataclass(frozen=True)
class BadgeContext:
    """Facts about the completion being recorded."""

    completed_on: date_type
    workout_hour: Optional[int] = None


BADGE_CATALOG: List[BadgeDefinition] = [
    BadgeDefinition("first_workout", "First Step", "👟", "Complete your first workout"),
    BadgeDefinition("streak_3", "On a Roll", "🔥", "3 days in a row"),
    BadgeDefinition("streak_7", "Week Warrior", "⚡", "7-day streak"),
    BadgeDefinition("streak_30", "Unstoppable", "💎", "30-day streak"),
    BadgeDefinition("level_5", "Rising Star", "⭐", "Reach Level 5"),
    BadgeDefinition("level_10", "Fitness Pro", "🏆", "Reach Level 10"),
    BadgeDefinition("perfect_week", "Perfect Week", "🌟", "7 workouts in 7 days"),
    BadgeDefinition("early_bird", "Early Bird", "🌅", "Work out before 8 AM"),
    BadgeDefinition("iron_will", "Iron Will", "💪", 'Push through 3 "Too Hard" sessions'),
    BadgeDefinition("explorer", "Explorer", "🗺️", "Try 3 different environments"),
]

BADGE_IDS = [badge.id for badge in BADGE_CATALOG]


def initial_badges() -> List[BadgeState]:
    """A locked BadgeState for every catalog entry."""
    return [BadgeState(id=badge_id) for badge_id in BADGE_IDS]


def backfill_badges(state: ProgressionState) -> bool:
    """
    Append catalog badges missing from a stored state.

    Returns:
        True if any badge was added
    """
    present = {badge.id for badge in state.badges}
    missing = [BadgeState(id=badge_id) for badge_id in BADGE_IDS if badge_id not in present]
    state.badges.extend(missing)
    return bool(missing)


# =============================================================================
# Rules
# =============================================================================


def _first_workout(state: ProgressionState, ctx: BadgeContext) -> bool:
    return sum(1 for entry in state.history if entry.completed) >= 1


def _perfect_week(state: ProgressionState, ctx: BadgeContext) -> bool:
    start = (ctx.completed_on - timedelta(days=PERFECT_WEEK_DAYS - 1)).isoformat()
    end = ctx.completed_on.isoformat()
    days = {
        entry.date
        for entry in state.history
        if entry.completed and start <= entry.date <= end
    }
    return len(days) >= PERFECT_WEEK_DAYS


def _early_bird(state: ProgressionState, ctx: BadgeContext) -> bool:
    return ctx.workout_hour is not None and ctx.workout_hour < EARLY_BIRD_HOUR


def _iron_will(state: ProgressionState, ctx: BadgeContext) -> bool:
    hard = sum(1 for entry in state.history if entry.feedback == Feedback.TOO_HARD)
    return hard >= IRON_WILL_COUNT


def _explorer(state: ProgressionState, ctx: BadgeContext) -> bool:
    environments = {entry.environment for entry in state.history if entry.environment}
    return len(environments) >= EXPLORER_ENVIRONMENTS


def _streak_rule(threshold: int) -> Callable[[ProgressionState, BadgeContext], bool]:
    return lambda state, ctx: state.streak_days >= threshold


def _level_rule(threshold: int) -> Callable[[ProgressionState, BadgeContext], bool]:
    return lambda state, ctx: state.level >= threshold


BADGE_RULES: Dict[str, Callable[[ProgressionState, BadgeContext], bool]] = {
    "first_workout": _first_workout,
    **{badge_id: _streak_rule(n) for badge_id, n in STREAK_BADGES.items()},
    **{badge_id: _level_rule(n) for badge_id, n in LEVEL_BADGES.items()},
    "perfect_week": _perfect_week,
    "early_bird": _early_bird,
    "iron_will": _iron_will,
    "explorer": _explorer,
}


def evaluate_badges(
    state: ProgressionState,
    ctx: BadgeContext,
    unlocked_at: datetime,
) -> List[BadgeState]:
    """
    Unlock every locked badge whose rule now holds.

    Mutates ``state.badges`` in place.

    Returns:
        Newly unlocked badges, in catalog order
    """
    order = {badge_id: i for i, badge_id in enumerate(BADGE_IDS)}
    newly_unlocked = []

    for badge in sorted(state.badges, key=lambda b: order.get(b.id, len(order))):
        if badge.unlocked:
            continue
        rule = BADGE_RULES.get(badge.id)
        if rule is not None and rule(state, ctx):
            badge.unlocked = True
            badge.unlocked_at = unlocked_at
            newly_unlocked.append(badge)

    return newly_unlocked
