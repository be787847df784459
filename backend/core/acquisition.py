"""
Exercise acquisition pipeline.

Part of FL-6: Exercise acquisition pipeline

Fetches the exercise pool for one rotation category:

1. A non-expired cache entry is returned as stored.
2. Otherwise the network catalog is queried under a deadline. A non-empty
   answer is normalized, cached and returned.
3. On failure, timeout or an empty answer, the bundled fallback dataset is
   used. Fallback results are never cached.

The deadline is enforced with asyncio.wait_for, which cancels the catalog
request. A request that misses the deadline therefore never reaches the
cache write below it.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from application.exceptions import CatalogClientError, PersistenceError
from application.ports import ExerciseCatalog
from backend.core.equipment import resolve_equipment
from backend.core.normalize import language_id_for, normalize_wger_exercise
from domain.models import ExerciseRecord
from infrastructure.cache_store import CacheStore, exercise_cache_key
from infrastructure.fallback_catalog import FallbackCatalog

logger = logging.getLogger(__name__)

# wger category ids
CATEGORY_IDS: Dict[str, int] = {
    "abs": 10,
    "arms": 8,
    "back": 12,
    "calves": 14,
    "cardio": 15,
    "chest": 11,
    "legs": 9,
    "shoulders": 13,
}

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_PAGE_SIZE = 25

LocaleSelector = Callable[[], str]


class ExerciseAcquisitionPipeline:
    """Network → cache → fallback exercise source."""

    def __init__(
        self,
        catalog: ExerciseCatalog,
        cache: CacheStore,
        fallback: FallbackCatalog,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        page_size: int = DEFAULT_PAGE_SIZE,
        locale: Optional[LocaleSelector] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            catalog: Remote exercise catalog
            cache: Cache store for fetched pools
            fallback: Bundled dataset used when the catalog fails
            timeout_seconds: Deadline for one catalog request
            page_size: Number of records requested per category
            locale: Returns the current display language (defaults to "en")
        """
        self._catalog = catalog
        self._cache = cache
        self._fallback = fallback
        self._timeout_seconds = timeout_seconds
        self._page_size = page_size
        self._locale = locale or (lambda: "en")

    async def get_exercises(
        self,
        environment: str,
        category_key: str,
        equipment_ids: Optional[Sequence[int]] = None,
    ) -> List[ExerciseRecord]:
        """
        Exercise pool for a category in an environment.

        Args:
            environment: Workout environment
            category_key: Rotation category (e.g., "legs")
            equipment_ids: Resolved equipment ids; resolved from the
                environment alone when omitted

        Returns:
            Exercise records; empty only when the fallback pool is empty too
        """
        ids = tuple(equipment_ids) if equipment_ids else resolve_equipment(environment)
        cache_key = exercise_cache_key(environment, category_key, ids)

        cached = self._read_cache(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {cache_key}")
            return cached

        language = self._locale()
        records = await self._fetch(category_key, ids, language)
        if records:
            try:
                self._cache.set_cached(
                    cache_key, [r.model_dump(mode="json") for r in records]
                )
            except PersistenceError as e:
                logger.warning(f"Could not cache exercises for {cache_key}: {e}")
            return records

        logger.info(f"Using fallback exercises for {environment}/{category_key}")
        return self._fallback.get_exercises(environment, category_key, language)

    def _read_cache(self, cache_key: str) -> Optional[List[ExerciseRecord]]:
        payload = self._cache.get_cached(cache_key)
        if not isinstance(payload, list):
            return None
        try:
            return [ExerciseRecord.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable cache entry {cache_key}: {e}")
            return None

    async def _fetch(
        self,
        category_key: str,
        equipment_ids: Sequence[int],
        language: str,
    ) -> List[ExerciseRecord]:
        category_id = CATEGORY_IDS.get(category_key)
        if category_id is None:
            logger.warning(f"Unknown category '{category_key}', skipping catalog")
            return []

        language_id = language_id_for(language)
        try:
            raw_results = await asyncio.wait_for(
                self._catalog.fetch_exercises(
                    equipment_ids,
                    category_id,
                    language_id,
                    limit=self._page_size,
                    offset=0,
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Catalog fetch for {category_key} timed out after {self._timeout_seconds}s"
            )
            return []
        except CatalogClientError as e:
            logger.warning(f"Catalog fetch failed for {category_key}: {e}")
            return []

        records = []
        for raw in raw_results:
            try:
                records.append(normalize_wger_exercise(raw, language_id))
            except (AttributeError, KeyError, TypeError, ValidationError) as e:
                logger.warning(f"Skipping malformed catalog record: {e}")

        if not records:
            logger.warning(f"Catalog returned no exercises for {category_key}")
        return records
