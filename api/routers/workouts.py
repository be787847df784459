"""
Workouts router for daily plan generation and completion.

Part of FL-8: Reproducible plan generation
Updated in FL-11: Completion endpoint

This router provides endpoints for:
- Getting (or generating) today's workout for a profile
- Looking up stored plans by date
- Recording a completed workout
"""

import logging
from datetime import date as date_type
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from api.deps import get_cache_store, get_gamification, get_generator
from application.exceptions import PersistenceError
from application.use_cases import CompleteWorkoutUseCase
from backend.core.gamification import GamificationEngine
from backend.core.plan_generator import WorkoutPlanGenerator
from domain.models import (
    BadgeState,
    CompletedSet,
    Feedback,
    Profile,
    ProgressionState,
    SessionOverride,
    WorkoutPlan,
)
from infrastructure.cache_store import CacheStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/workouts",
    tags=["Workouts"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class TodayWorkoutRequest(BaseModel):
    """Request model for today's workout."""
    profile: Profile
    date: Optional[date_type] = Field(
        default=None, description="Plan date; defaults to today (UTC)"
    )
    session_override: Optional[SessionOverride] = None
    regenerate: bool = Field(
        default=False, description="Discard the stored plan and generate a new one"
    )


class WorkoutHistoryResponse(BaseModel):
    """Response model for a profile's stored plans."""
    profile_id: str
    plans: List[WorkoutPlan]
    total: int


class CompleteWorkoutRequest(BaseModel):
    """Request model for completing a workout."""
    feedback: Optional[Feedback] = None
    completed_at: Optional[datetime] = Field(
        default=None,
        description="Completion time; its hour decides the early-bird badge",
    )
    completed_sets: Dict[str, List[CompletedSet]] = Field(
        default_factory=dict, description="Logged sets keyed by exercise id"
    )


class CompleteWorkoutResponse(BaseModel):
    """Response model for a completed workout."""
    plan: WorkoutPlan
    progression: ProgressionState
    xp_earned: int
    leveled_up: bool
    new_level: int
    newly_unlocked_badges: List[BadgeState] = Field(default_factory=list)


def _save_failed(e: PersistenceError) -> HTTPException:
    logger.error(f"Persistence failure for key '{e.key}': {e}")
    return HTTPException(status_code=503, detail=f"Could not save workout data: {e}")


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/today", response_model=WorkoutPlan)
async def get_today_workout(
    request: TodayWorkoutRequest,
    generator: WorkoutPlanGenerator = Depends(get_generator),
    gamification: GamificationEngine = Depends(get_gamification),
) -> WorkoutPlan:
    """
    Get the workout for a profile's day, generating it on first request.

    A session override (or ``regenerate``) always produces a fresh plan
    that replaces the stored one.
    """
    plan_date = request.date.isoformat() if request.date else None
    try:
        progression = gamification.get_or_init_progression(request.profile.id)
        if request.regenerate:
            return await generator.generate_plan(
                request.profile, progression, plan_date, request.session_override
            )
        return await generator.get_or_create_plan(
            request.profile, progression, plan_date, request.session_override
        )
    except PersistenceError as e:
        raise _save_failed(e)


@router.get("/{profile_id}", response_model=WorkoutHistoryResponse)
async def list_workouts(
    profile_id: str = Path(..., min_length=1),
    cache: CacheStore = Depends(get_cache_store),
) -> WorkoutHistoryResponse:
    """List a profile's stored plans, newest first."""
    plans = list(cache.list_plans(profile_id).values())
    plans.reverse()
    return WorkoutHistoryResponse(profile_id=profile_id, plans=plans, total=len(plans))


@router.get("/{profile_id}/{date}", response_model=WorkoutPlan)
async def get_workout(
    profile_id: str = Path(..., min_length=1),
    date: date_type = Path(..., description="Plan date (YYYY-MM-DD)"),
    cache: CacheStore = Depends(get_cache_store),
) -> WorkoutPlan:
    """Get the stored plan for a date."""
    plan = cache.load_plan(profile_id, date.isoformat())
    if plan is None:
        raise HTTPException(
            status_code=404,
            detail=f"No workout plan for '{profile_id}' on {date.isoformat()}",
        )
    return plan


@router.post("/{profile_id}/{date}/complete", response_model=CompleteWorkoutResponse)
async def complete_workout(
    request: CompleteWorkoutRequest,
    profile_id: str = Path(..., min_length=1),
    date: date_type = Path(..., description="Plan date (YYYY-MM-DD)"),
    cache: CacheStore = Depends(get_cache_store),
    gamification: GamificationEngine = Depends(get_gamification),
) -> CompleteWorkoutResponse:
    """
    Record a finished workout.

    Awards XP, updates the streak, applies difficulty feedback and unlocks
    badges. A plan can only be completed once.
    """
    use_case = CompleteWorkoutUseCase(cache=cache, gamification=gamification)
    try:
        result = use_case.execute(
            profile_id,
            date.isoformat(),
            feedback=request.feedback,
            completed_at=request.completed_at,
            completed_sets=request.completed_sets,
        )
    except PersistenceError as e:
        raise _save_failed(e)

    if result.not_found:
        raise HTTPException(status_code=404, detail=result.error)
    if result.already_completed:
        raise HTTPException(status_code=409, detail=result.error)

    completion = result.completion
    return CompleteWorkoutResponse(
        plan=result.plan,
        progression=completion.progression,
        xp_earned=completion.xp_earned,
        leveled_up=completion.leveled_up,
        new_level=completion.new_level,
        newly_unlocked_badges=completion.newly_unlocked_badges,
    )
