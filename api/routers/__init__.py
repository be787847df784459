"""
Router package for the FitLife workout API.

Part of FL-1: Create api/routers skeleton and wiring

This package contains all API routers organized by domain:
- health: Health check
- workouts: Daily plan generation, lookup and completion
- progression: XP, streaks, badges and difficulty feedback
- profiles: Cleanup of stored profile data
"""

from api.routers.health import router as health_router
from api.routers.profiles import router as profiles_router
from api.routers.progression import router as progression_router
from api.routers.workouts import router as workouts_router

__all__ = [
    "health_router",
    "profiles_router",
    "progression_router",
    "workouts_router",
]
