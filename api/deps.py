"""
FastAPI Dependency Providers for the FitLife workout API.

Part of FL-4: Dependency-injected service context

The process-scoped AppContext is built by create_app() and stored on
app.state. These providers hand its components to the routers.

Usage in routers:
    from api.deps import get_generator
    from backend.core.plan_generator import WorkoutPlanGenerator

    @router.post("/workouts/today")
    async def today(generator: WorkoutPlanGenerator = Depends(get_generator)):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_context] = lambda: build_context(settings, store=...)
"""

from fastapi import Depends, Request

from backend.context import AppContext
from backend.core.gamification import GamificationEngine
from backend.core.plan_generator import WorkoutPlanGenerator
from backend.settings import Settings, get_settings as _get_settings
from infrastructure.cache_store import CacheStore


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Context Providers
# =============================================================================


def get_context(request: Request) -> AppContext:
    """The AppContext attached to the running application."""
    return request.app.state.context


def get_cache_store(context: AppContext = Depends(get_context)) -> CacheStore:
    return context.cache


def get_generator(context: AppContext = Depends(get_context)) -> WorkoutPlanGenerator:
    return context.generator


def get_gamification(context: AppContext = Depends(get_context)) -> GamificationEngine:
    return context.gamification


__all__ = [
    "get_settings",
    "get_context",
    "get_cache_store",
    "get_generator",
    "get_gamification",
]
