"""
Unit tests for CacheStore.

FL-3: Persistence layer
FL-14: Storage quota handling
"""

import pytest

from application.exceptions import PersistenceError
from domain.models import ProgressionState, WorkoutPlan
from infrastructure import CacheStore, InMemoryKeyValueStore
from infrastructure.cache_store import exercise_cache_key, plan_key, progression_key
from tests.fakes import FailingKeyValueStore


def make_plan(profile_id: str = "p-1", date: str = "2024-03-04") -> WorkoutPlan:
    return WorkoutPlan(
        profile_id=profile_id,
        date=date,
        difficulty_tier=2,
        environment="home_no_equipment",
        estimated_duration_minutes=10,
    )


@pytest.mark.unit
class TestKeys:
    def test_exercise_key_sorts_and_deduplicates(self):
        assert exercise_cache_key("home_gym", "chest", [11, 3, 7, 3]) == (
            "exercises:home_gym:chest:3-7-11"
        )

    def test_exercise_key_differs_by_equipment(self):
        assert exercise_cache_key("outdoor", "legs", [7]) != exercise_cache_key(
            "outdoor", "legs", [7, 10]
        )

    def test_plan_and_progression_keys(self):
        assert plan_key("p-1", "2024-03-04") == "plan:p-1:2024-03-04"
        assert progression_key("p-1") == "progression:p-1"


@pytest.mark.unit
class TestTtlEntries:
    def test_fresh_entry_is_returned_as_written(self, cache):
        payload = [{"id": "1", "name": "Push-up"}]
        cache.set_cached("exercises:x", payload)
        assert cache.get_cached("exercises:x") == payload

    def test_entry_just_before_ttl_is_returned(self, cache, clock):
        cache.set_cached("exercises:x", [1])
        clock.advance(seconds=cache.ttl_seconds - 1)
        assert cache.get_cached("exercises:x") == [1]

    def test_entry_just_after_ttl_is_absent(self, cache, clock):
        cache.set_cached("exercises:x", [1])
        clock.advance(seconds=cache.ttl_seconds + 1)
        assert cache.get_cached("exercises:x") is None

    def test_missing_and_malformed_entries(self, cache, store):
        assert cache.get_cached("exercises:nothing") is None
        store.set("exercises:raw", [1, 2, 3])
        assert cache.get_cached("exercises:raw") is None

    def test_clear_exercise_cache(self, cache):
        cache.set_cached("exercises:a", [1])
        cache.set_cached("exercises:b", [2])
        cache.save_plan(make_plan())

        assert cache.clear_exercise_cache() == 2
        assert cache.get_cached("exercises:a") is None
        assert cache.load_plan("p-1", "2024-03-04") is not None


@pytest.mark.unit
class TestPlans:
    def test_save_and_load(self, cache):
        plan = make_plan()
        cache.save_plan(plan)

        loaded = cache.load_plan("p-1", "2024-03-04")

        assert loaded.id == plan.id
        assert loaded == plan

    def test_save_replaces_same_date(self, cache):
        cache.save_plan(make_plan())
        second = make_plan()
        cache.save_plan(second)

        assert cache.load_plan("p-1", "2024-03-04").id == second.id
        assert len(cache.list_plans("p-1")) == 1

    def test_list_plans_is_per_profile_and_sorted(self, cache):
        cache.save_plan(make_plan(date="2024-03-03"))
        cache.save_plan(make_plan(date="2024-03-01"))
        cache.save_plan(make_plan(profile_id="p-2"))

        assert list(cache.list_plans("p-1")) == ["2024-03-01", "2024-03-03"]

    def test_save_prunes_profiles_plans_out_of_window(self, cache):
        # Clock is 2024-03-04; the 30-day window starts 2024-02-03
        cache.save_plan(make_plan(date="2024-01-15"))
        cache.save_plan(make_plan(profile_id="p-2", date="2024-01-15"))
        assert cache.load_plan("p-1", "2024-01-15") is not None

        cache.save_plan(make_plan(date="2024-03-04"))

        assert cache.load_plan("p-1", "2024-01-15") is None
        assert cache.load_plan("p-2", "2024-01-15") is not None

    def test_delete_plan(self, cache):
        cache.save_plan(make_plan())
        cache.delete_plan("p-1", "2024-03-04")
        assert cache.load_plan("p-1", "2024-03-04") is None

    def test_unreadable_plan_is_absent(self, cache, store):
        store.set(plan_key("p-1", "2024-03-04"), {"garbage": True})
        assert cache.load_plan("p-1", "2024-03-04") is None


@pytest.mark.unit
class TestProgression:
    def test_save_and_load(self, cache):
        cache.save_progression(ProgressionState(profile_id="p-1", xp=250))

        loaded = cache.load_progression("p-1")

        assert loaded.xp == 250
        assert loaded.level == 2

    def test_missing(self, cache):
        assert cache.load_progression("nobody") is None

    def test_out_of_range_modifier_is_unreadable(self, cache, store):
        store.set(progression_key("p-1"), {"profile_id": "p-1", "difficulty_modifier": 9})
        assert cache.load_progression("p-1") is None


@pytest.mark.unit
class TestMaintenance:
    def test_purge_profile(self, cache):
        cache.save_plan(make_plan(date="2024-03-03"))
        cache.save_plan(make_plan(date="2024-03-04"))
        cache.save_plan(make_plan(profile_id="p-2"))
        cache.save_progression(ProgressionState(profile_id="p-1"))

        assert cache.purge_profile("p-1") == 3
        assert cache.list_plans("p-1") == {}
        assert cache.load_progression("p-1") is None
        assert cache.load_plan("p-2", "2024-03-04") is not None

    def test_prune_drops_old_plans_and_expired_pools(self, cache, store, clock):
        cache.set_cached("exercises:stale", [1])
        clock.advance(days=2)
        cache.set_cached("exercises:fresh", [2])
        store.set(
            plan_key("p-2", "2024-01-01"),
            make_plan(profile_id="p-2", date="2024-01-01").model_dump(mode="json"),
        )
        cache.save_plan(make_plan(profile_id="p-3", date="2024-03-05"))

        removed = cache.prune()

        assert removed == 2
        assert cache.get_cached("exercises:fresh") == [2]
        assert cache.load_plan("p-2", "2024-01-01") is None
        assert cache.load_plan("p-3", "2024-03-05") is not None

    def test_is_available(self, cache):
        assert cache.is_available() is True
        assert CacheStore(FailingKeyValueStore()).is_available() is False


@pytest.mark.unit
class TestQuotaPressure:
    def test_prune_and_retry_succeeds(self, clock):
        store = InMemoryKeyValueStore(max_bytes=1500)
        cache = CacheStore(store, clock=clock)
        # Plans of other profiles outside the retention window fill the store
        for i in range(1, 4):
            store.set(plan_key(f"old-{i}", f"2023-12-0{i}"), {"filler": "x" * 450})

        cache.save_progression(ProgressionState(profile_id="p-1", xp=999))

        assert cache.load_progression("p-1").xp == 999
        assert store.keys("plan:") == []

    def test_second_quota_failure_raises_persistence_error(self, clock):
        store = InMemoryKeyValueStore(max_bytes=50)
        cache = CacheStore(store, clock=clock)

        with pytest.raises(PersistenceError) as exc_info:
            cache.save_plan(make_plan())

        assert exc_info.value.key == plan_key("p-1", "2024-03-04")
        assert "storage is full" in str(exc_info.value)

    def test_backend_error_raises_persistence_error_without_retry(self):
        store = FailingKeyValueStore()
        cache = CacheStore(store)

        with pytest.raises(PersistenceError):
            cache.save_progression(ProgressionState(profile_id="p-1"))

        assert store.write_attempts == 1
