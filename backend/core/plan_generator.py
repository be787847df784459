"""
Workout plan generator.

Part of FL-8: Reproducible plan generation
Updated in FL-12: Session overrides

Builds one day's workout for a profile:
- The weekday of the plan date picks two muscle-group categories
- The fitness level sets how many exercises to include
- The adaptive difficulty modifier picks a sets/reps/rest preset
- Each category pool is shuffled with a seed derived from date, profile and
  category, so the same inputs always produce the same plan

Plans are stored per (profile, date). Ordinary requests reuse the stored
plan; a session override always regenerates and replaces it.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date as date_type
from typing import Callable, Dict, List, Optional, Tuple

from backend.core.acquisition import ExerciseAcquisitionPipeline
from backend.core.equipment import resolve_equipment
from backend.core.seeded_sequence import SeededSequence
from domain.models import (
    DEFAULT_ENVIRONMENT,
    ExerciseRecord,
    Profile,
    ProgressionState,
    Provenance,
    RepTarget,
    SessionOverride,
    TimedTarget,
    WorkoutExercise,
    WorkoutPlan,
)
from domain.models.progression import DEFAULT_DIFFICULTY, MAX_DIFFICULTY, MIN_DIFFICULTY
from infrastructure.cache_store import CacheStore, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifficultyPreset:
    """Prescription shared by every exercise of a plan."""

    sets: int
    reps: int
    rest_seconds: int


DIFFICULTY_PRESETS: Dict[int, DifficultyPreset] = {
    1: DifficultyPreset(sets=2, reps=8, rest_seconds=90),
    2: DifficultyPreset(sets=3, reps=10, rest_seconds=75),
    3: DifficultyPreset(sets=3, reps=12, rest_seconds=60),
    4: DifficultyPreset(sets=4, reps=12, rest_seconds=45),
    5: DifficultyPreset(sets=4, reps=15, rest_seconds=30),
}

EXERCISE_COUNT: Dict[str, int] = {
    "beginner": 4,
    "intermediate": 6,
    "advanced": 8,
}
DEFAULT_EXERCISE_COUNT = 4

# Index 0 is Sunday
DAY_ROTATION: Tuple[Tuple[str, ...], ...] = (
    ("chest", "arms"),
    ("back", "shoulders"),
    ("legs", "calves"),
    ("abs", "cardio"),
    ("chest", "shoulders"),
    ("legs", "abs"),
    ("cardio", "back"),
)

YOUTH_AGE_LIMIT = 15
SECONDS_PER_REP = 4
MIN_DURATION_MINUTES = 10


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def difficulty_tier(modifier: Optional[float]) -> int:
    """Clamp the modifier to [1, 5] and round it to a preset tier."""
    if modifier is None:
        modifier = DEFAULT_DIFFICULTY
    clamped = max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, modifier))
    return round_half_up(clamped)


def rotation_for(plan_date: str) -> Tuple[str, ...]:
    """Categories trained on a given ISO date."""
    weekday = date_type.fromisoformat(plan_date).weekday()
    return DAY_ROTATION[(weekday + 1) % 7]


def estimate_duration_minutes(exercises: List[WorkoutExercise]) -> int:
    """Sets × (rest + effort) over the plan, in minutes, never under 10."""
    total_seconds = sum(
        ex.sets * (ex.rest_seconds + ex.effort_seconds(SECONDS_PER_REP))
        for ex in exercises
    )
    return max(MIN_DURATION_MINUTES, round_half_up(total_seconds / 60))


def _prescribe(record: ExerciseRecord, preset: DifficultyPreset) -> WorkoutExercise:
    if record.duration_seconds is not None:
        target = TimedTarget(duration_seconds=record.duration_seconds)
    else:
        target = RepTarget(reps=preset.reps)
    return WorkoutExercise(
        **record.model_dump(exclude={"tutorial_url"}),
        sets=preset.sets,
        target=target,
        rest_seconds=preset.rest_seconds,
    )


class WorkoutPlanGenerator:
    """
    Generates and stores daily workout plans.

    Example:
        >>> generator = WorkoutPlanGenerator(pipeline, cache)
        >>> plan = await generator.get_or_create_plan(profile, progression)
        >>> again = await generator.get_or_create_plan(profile, progression)
        >>> plan.id == again.id
        True
    """

    def __init__(
        self,
        pipeline: ExerciseAcquisitionPipeline,
        cache: CacheStore,
        today: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the generator.

        Args:
            pipeline: Source of exercise pools
            cache: Plan storage
            today: Returns today's ISO date; defaults to the UTC date
        """
        self._pipeline = pipeline
        self._cache = cache
        self._today = today or (lambda: utc_now().date().isoformat())

    async def get_or_create_plan(
        self,
        profile: Profile,
        progression: Optional[ProgressionState] = None,
        date: Optional[str] = None,
        session_override: Optional[SessionOverride] = None,
    ) -> WorkoutPlan:
        """
        Return the stored plan for the date, generating one if needed.

        A session override skips the lookup and always regenerates.
        """
        plan_date = date or self._today()
        if session_override is None:
            existing = self._cache.load_plan(profile.id, plan_date)
            if existing is not None:
                return existing
        return await self.generate_plan(profile, progression, plan_date, session_override)

    async def generate_plan(
        self,
        profile: Profile,
        progression: Optional[ProgressionState] = None,
        date: Optional[str] = None,
        session_override: Optional[SessionOverride] = None,
    ) -> WorkoutPlan:
        """
        Generate a fresh plan and store it, replacing any plan for that date.

        Args:
            profile: The profile the plan is for
            progression: Current progression (for the difficulty modifier)
            date: ISO plan date; defaults to today
            session_override: Environment/accessories chosen for this session

        Returns:
            The stored plan; it may hold fewer exercises than the target
            count when the pools run dry

        Raises:
            PersistenceError: If the plan could not be saved
        """
        plan_date = date or self._today()
        environment = (
            (session_override.environment if session_override else None)
            or profile.default_environment
            or DEFAULT_ENVIRONMENT
        )
        accessories = list(session_override.accessories) if session_override else []
        equipment_ids = resolve_equipment(environment, accessories)

        rotation = rotation_for(plan_date)
        count = EXERCISE_COUNT.get(profile.fitness_level, DEFAULT_EXERCISE_COUNT)
        tier = difficulty_tier(progression.difficulty_modifier if progression else None)
        preset = DIFFICULTY_PRESETS[tier]
        is_youth = profile.age < YOUTH_AGE_LIMIT

        exercises: List[WorkoutExercise] = []
        chosen_ids = set()

        for category_key in rotation:
            if len(exercises) >= count:
                break

            pool = await self._pipeline.get_exercises(environment, category_key, equipment_ids)
            if is_youth:
                pool = [
                    r
                    for r in pool
                    if r.provenance == Provenance.NETWORK or not r.high_impact
                ]

            shuffled = SeededSequence(plan_date + profile.id + category_key).shuffle(pool)
            take = math.ceil((count - len(exercises)) / len(rotation)) + 1

            for record in shuffled[:take]:
                if len(exercises) >= count:
                    break
                if record.id in chosen_ids:
                    continue
                exercises.append(_prescribe(record, preset))
                chosen_ids.add(record.id)

        plan = WorkoutPlan(
            profile_id=profile.id,
            date=plan_date,
            difficulty_tier=tier,
            environment=environment,
            accessories=accessories,
            exercises=exercises,
            estimated_duration_minutes=estimate_duration_minutes(exercises),
        )

        if len(exercises) < count:
            logger.info(
                f"Generated partial plan for {profile.id} on {plan_date}: "
                f"{len(exercises)}/{count} exercises"
            )

        self._cache.save_plan(plan)
        return plan
