"""
Progression router for XP, streaks, badges and difficulty feedback.

Part of FL-11: Gamification engine

This router provides endpoints for:
- A profile's progression state with the badge catalog
- Standalone difficulty feedback (outside a workout completion)
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from api.deps import get_gamification
from application.exceptions import PersistenceError
from backend.core.badges import BADGE_CATALOG
from backend.core.gamification import GamificationEngine
from domain.models import Feedback, ProgressionState

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/progression",
    tags=["Progression"],
)


# =============================================================================
# Request/Response Models
# =============================================================================


class BadgeView(BaseModel):
    """A badge definition merged with its unlock state."""
    id: str
    name: str
    icon: str
    description: str
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None


class ProgressionResponse(BaseModel):
    """Response model for a profile's progression."""
    progression: ProgressionState
    level: int
    badges: List[BadgeView]
    unlocked_count: int


class FeedbackRequest(BaseModel):
    """Request model for difficulty feedback."""
    feedback: Feedback


def _badge_views(state: ProgressionState) -> List[BadgeView]:
    by_id = {badge.id: badge for badge in state.badges}
    views = []
    for definition in BADGE_CATALOG:
        badge = by_id.get(definition.id)
        views.append(
            BadgeView(
                id=definition.id,
                name=definition.name,
                icon=definition.icon,
                description=definition.description,
                unlocked=bool(badge and badge.unlocked),
                unlocked_at=badge.unlocked_at if badge else None,
            )
        )
    return views


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/{profile_id}", response_model=ProgressionResponse)
async def get_progression(
    profile_id: str = Path(..., min_length=1),
    gamification: GamificationEngine = Depends(get_gamification),
) -> ProgressionResponse:
    """Get a profile's progression, initializing it on first access."""
    try:
        state = gamification.get_or_init_progression(profile_id)
    except PersistenceError as e:
        logger.error(f"Could not initialize progression for {profile_id}: {e}")
        raise HTTPException(status_code=503, detail=f"Could not save workout data: {e}")

    badges = _badge_views(state)
    return ProgressionResponse(
        progression=state,
        level=state.level,
        badges=badges,
        unlocked_count=sum(1 for b in badges if b.unlocked),
    )


@router.post("/{profile_id}/feedback", response_model=ProgressionState)
async def submit_feedback(
    request: FeedbackRequest,
    profile_id: str = Path(..., min_length=1),
    gamification: GamificationEngine = Depends(get_gamification),
) -> ProgressionState:
    """Adjust the adaptive difficulty modifier (too_easy +0.5, too_hard -0.5)."""
    try:
        return gamification.apply_feedback(profile_id, request.feedback)
    except PersistenceError as e:
        logger.error(f"Could not save feedback for {profile_id}: {e}")
        raise HTTPException(status_code=503, detail=f"Could not save workout data: {e}")
