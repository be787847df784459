"""
CompleteWorkout Use Case.

Part of FL-11: Gamification engine

Marks a stored plan as completed and feeds it to the gamification engine.

Workflow:
1. Load the plan for (profile, date)
2. Reject missing or already completed plans
3. Record feedback and logged sets on the plan and save it
4. Update XP, streak, badges and difficulty; if that cannot be saved the
   plan is reopened so the completion can be retried
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from application.exceptions import PersistenceError
from domain.models import CompletedSet, CompletionResult, Feedback, WorkoutPlan

logger = logging.getLogger(__name__)


@dataclass
class CompleteWorkoutResult:
    """Result of the CompleteWorkout use case execution."""

    success: bool
    plan: Optional[WorkoutPlan] = None
    completion: Optional[CompletionResult] = None
    error: Optional[str] = None
    not_found: bool = False
    already_completed: bool = False


class CompleteWorkoutUseCase:
    """
    Use case for recording a finished workout.

    Usage:
        >>> use_case = CompleteWorkoutUseCase(cache=cache, gamification=engine)
        >>> result = use_case.execute("p-1", "2024-03-04", feedback=Feedback.JUST_RIGHT)
        >>> result.success
        True
    """

    def __init__(self, cache, gamification):
        """
        Initialize with required dependencies.

        Args:
            cache: CacheStore holding the plans
            gamification: GamificationEngine updating the progression
        """
        self._cache = cache
        self._gamification = gamification

    def execute(
        self,
        profile_id: str,
        date: str,
        feedback: Optional[Feedback] = None,
        completed_at: Optional[datetime] = None,
        completed_sets: Optional[Dict[str, List[CompletedSet]]] = None,
    ) -> CompleteWorkoutResult:
        """
        Complete the plan stored for a profile and date.

        Args:
            profile_id: Owner of the plan
            date: ISO date of the plan
            feedback: Optional difficulty feedback
            completed_at: Completion time (defaults to now)
            completed_sets: Logged sets keyed by exercise id

        Returns:
            CompleteWorkoutResult with the updated plan and progression

        Raises:
            PersistenceError: If the plan or progression could not be saved
        """
        plan = self._cache.load_plan(profile_id, date)
        if plan is None:
            return CompleteWorkoutResult(
                success=False,
                error=f"No workout plan for {profile_id} on {date}",
                not_found=True,
            )
        if plan.completed:
            return CompleteWorkoutResult(
                success=False,
                plan=plan,
                error=f"Workout for {date} is already completed",
                already_completed=True,
            )

        for exercise in plan.exercises:
            logged = (completed_sets or {}).get(exercise.id)
            if logged:
                exercise.completed_sets = list(logged)

        plan.completed = True
        plan.feedback = feedback
        self._cache.save_plan(plan)

        try:
            completion = self._gamification.complete_workout(
                profile_id, plan, feedback=feedback, completed_at=completed_at
            )
        except PersistenceError:
            logger.error(
                f"Progression for {profile_id} not saved, reopening workout {plan.id}"
            )
            plan.completed = False
            plan.feedback = None
            self._cache.save_plan(plan)
            raise

        logger.info(
            f"Workout {plan.id} completed by {profile_id}: +{completion.xp_earned} XP"
        )
        return CompleteWorkoutResult(success=True, plan=plan, completion=completion)
