"""
Profiles router.

Part of FL-3: Persistence layer

Profiles themselves are owned by the client; this router only clears the
data stored for a profile once the client deletes it.
"""

import logging

from fastapi import APIRouter, Depends, Path

from api.deps import get_cache_store
from infrastructure.cache_store import CacheStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
)


@router.delete("/{profile_id}/data")
async def delete_profile_data(
    profile_id: str = Path(..., min_length=1),
    cache: CacheStore = Depends(get_cache_store),
):
    """Remove all stored plans and progression of a profile."""
    removed = cache.purge_profile(profile_id)
    return {"profile_id": profile_id, "removed": removed}
