"""
Health check router.

Part of FL-1: Create api/routers skeleton and wiring

This router provides health check endpoints for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter, Depends

from api.deps import get_context
from backend.context import AppContext

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health(context: AppContext = Depends(get_context)):
    """
    Liveness endpoint for fitlife-api.

    The service stays up when storage is degraded, so the status is "ok"
    either way; ``storage`` reports whether writes currently succeed.

    Returns:
        dict: Status indicator for health checks
    """
    storage_ok = context.cache.is_available()
    return {
        "status": "ok",
        "storage": "ok" if storage_ok else "unavailable",
        "fallback_dataset_version": context.fallback.version,
    }
