"""
API package for the FitLife workout API.

Part of FL-1: Create api/routers skeleton and wiring
Updated in FL-4: Add dependency providers

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_cache_store,
    get_context,
    get_gamification,
    get_generator,
    get_settings,
)

__all__ = [
    # Settings
    "get_settings",
    # Context
    "get_context",
    "get_cache_store",
    "get_generator",
    "get_gamification",
]
