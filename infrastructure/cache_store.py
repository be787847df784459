"""
Cache store: TTL entries, dated plans and progression state.

Part of FL-3: Persistence layer
Updated in FL-14: Storage quota handling

The cache store is the only shared mutable object in the core. It sits on
top of any KeyValueStore and adds:
- TTL expiry for exercise-pool entries
- Plan storage keyed by (profile, date) with a retention window
- Progression storage per profile
- One prune-and-retry pass when a write hits the storage quota

Key layout:
    exercises:{environment}:{category}:{equipment ids joined by "-"}
    plan:{profile_id}:{YYYY-MM-DD}
    progression:{profile_id}
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, Optional

from pydantic import ValidationError
from tenacity import Retrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from application.exceptions import PersistenceError, StorageError, StorageQuotaExceeded
from application.ports import KeyValueStore
from domain.models import ProgressionState, WorkoutPlan

logger = logging.getLogger(__name__)

EXERCISE_PREFIX = "exercises:"
PLAN_PREFIX = "plan:"
PROGRESSION_PREFIX = "progression:"
HEALTH_PROBE_KEY = "__fitlife_probe__"

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_RETENTION_DAYS = 30

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def exercise_cache_key(
    environment: str,
    category_key: str,
    equipment_ids: Iterable[int],
) -> str:
    """
    Build the cache key for an exercise pool.

    The equipment ids are sorted so that the same set always maps to the
    same key, and a different accessory selection maps to a different one.
    """
    equipment_part = "-".join(str(i) for i in sorted(set(equipment_ids)))
    return f"{EXERCISE_PREFIX}{environment}:{category_key}:{equipment_part}"


def plan_key(profile_id: str, date: str) -> str:
    return f"{PLAN_PREFIX}{profile_id}:{date}"


def progression_key(profile_id: str) -> str:
    return f"{PROGRESSION_PREFIX}{profile_id}"


def _plan_date(key: str) -> str:
    return key.rsplit(":", 1)[-1]


class CacheStore:
    """
    Durable store used by the acquisition pipeline, generator and
    gamification engine.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the cache store.

        Args:
            store: Underlying key-value backend
            ttl_seconds: Lifetime of exercise-pool entries
            retention_days: Plans dated further back than this are pruned
            clock: Returns the current time (timezone-aware); defaults to UTC now
        """
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._retention_days = retention_days
        self._clock = clock or utc_now

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    # -------------------------------------------------------------------------
    # TTL entries
    # -------------------------------------------------------------------------

    def get_cached(self, key: str) -> Optional[Any]:
        """
        Return a cached payload if present and not expired.

        Args:
            key: Cache key

        Returns:
            The payload exactly as written, or None
        """
        entry = self._store.get(key)
        if not isinstance(entry, dict) or "fetched_at" not in entry:
            return None
        if self._is_expired(entry):
            return None
        return entry.get("payload")

    def set_cached(self, key: str, payload: Any) -> None:
        """
        Store a payload stamped with the current time.

        Raises:
            PersistenceError: If the write fails even after pruning
        """
        entry = {
            "key": key,
            "payload": payload,
            "fetched_at": self._clock().timestamp(),
        }
        self._write(key, entry)

    def clear_exercise_cache(self) -> int:
        """Drop every cached exercise pool. Returns the number removed."""
        keys = self._store.keys(EXERCISE_PREFIX)
        for key in keys:
            self._store.delete(key)
        return len(keys)

    def _is_expired(self, entry: Dict[str, Any]) -> bool:
        try:
            fetched_at = float(entry["fetched_at"])
        except (TypeError, ValueError):
            return True
        age = self._clock().timestamp() - fetched_at
        return age > self._ttl_seconds

    # -------------------------------------------------------------------------
    # Plans
    # -------------------------------------------------------------------------

    def load_plan(self, profile_id: str, date: str) -> Optional[WorkoutPlan]:
        """Load the plan stored for a profile and date, if any."""
        raw = self._store.get(plan_key(profile_id, date))
        if raw is None:
            return None
        try:
            return WorkoutPlan.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable plan for {profile_id} on {date}: {e}")
            return None

    def save_plan(self, plan: WorkoutPlan) -> None:
        """
        Store a plan under (profile_id, date), replacing any existing one.

        Also drops this profile's plans that fell out of the retention window.

        Raises:
            PersistenceError: If the plan could not be saved
        """
        key = plan_key(plan.profile_id, plan.date)
        self._write(key, plan.model_dump(mode="json"))
        self._prune_plans(prefix=f"{PLAN_PREFIX}{plan.profile_id}:", keep=key)

    def delete_plan(self, profile_id: str, date: str) -> None:
        self._store.delete(plan_key(profile_id, date))

    def list_plans(self, profile_id: str) -> Dict[str, WorkoutPlan]:
        """All stored plans for a profile, keyed by date (oldest first)."""
        prefix = f"{PLAN_PREFIX}{profile_id}:"
        plans: Dict[str, WorkoutPlan] = {}
        for key in sorted(self._store.keys(prefix)):
            date = _plan_date(key)
            plan = self.load_plan(profile_id, date)
            if plan is not None:
                plans[date] = plan
        return plans

    # -------------------------------------------------------------------------
    # Progression
    # -------------------------------------------------------------------------

    def load_progression(self, profile_id: str) -> Optional[ProgressionState]:
        raw = self._store.get(progression_key(profile_id))
        if raw is None:
            return None
        try:
            return ProgressionState.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable progression for {profile_id}: {e}")
            return None

    def save_progression(self, state: ProgressionState) -> None:
        """
        Persist a profile's progression state.

        Raises:
            PersistenceError: If the state could not be saved
        """
        self._write(progression_key(state.profile_id), state.model_dump(mode="json"))

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def purge_profile(self, profile_id: str) -> int:
        """Remove all plans and progression of a deleted profile."""
        keys = self._store.keys(f"{PLAN_PREFIX}{profile_id}:")
        keys.append(progression_key(profile_id))
        for key in keys:
            self._store.delete(key)
        logger.info(f"Purged stored data for profile {profile_id}")
        return len(keys)

    def prune(self) -> int:
        """
        Emergency prune across all profiles.

        Drops plans dated before the retention window and expired
        exercise-pool entries.

        Returns:
            Number of entries removed
        """
        removed = self._prune_plans(prefix=PLAN_PREFIX)

        for key in self._store.keys(EXERCISE_PREFIX):
            entry = self._store.get(key)
            if not isinstance(entry, dict) or self._is_expired(entry):
                self._store.delete(key)
                removed += 1

        logger.info(f"Pruned {removed} stored entries")
        return removed

    def is_available(self) -> bool:
        """Check that the backend accepts a write."""
        try:
            self._store.set(HEALTH_PROBE_KEY, "1")
            self._store.delete(HEALTH_PROBE_KEY)
        except StorageError as e:
            logger.warning(f"Storage unavailable: {e}")
            return False
        return True

    def _prune_plans(self, prefix: str, keep: Optional[str] = None) -> int:
        cutoff = (self._clock() - timedelta(days=self._retention_days)).date().isoformat()
        removed = 0
        for key in self._store.keys(prefix):
            if key != keep and _plan_date(key) < cutoff:
                self._store.delete(key)
                removed += 1
        return removed

    def _prune_before_retry(self, retry_state: RetryCallState) -> None:
        logger.warning("Storage quota exceeded, pruning old entries before retrying")
        self.prune()

    def _write(self, key: str, value: Any) -> None:
        """Write with a single prune-and-retry on quota errors."""
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(2),
                retry=retry_if_exception_type(StorageQuotaExceeded),
                before_sleep=self._prune_before_retry,
                reraise=True,
            ):
                with attempt:
                    self._store.set(key, value)
        except StorageQuotaExceeded as e:
            logger.error(f"Still cannot write '{key}' after pruning: {e}")
            raise PersistenceError("Could not save data: storage is full", key) from e
        except StorageError as e:
            logger.error(f"Failed to write '{key}': {e}")
            raise PersistenceError("Could not save data", key) from e
