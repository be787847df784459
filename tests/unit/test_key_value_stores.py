"""
Unit tests for the key-value store backends.

FL-3: Persistence layer
FL-14: Storage quota handling
"""

from unittest.mock import MagicMock

import pytest

from application.exceptions import StorageError, StorageQuotaExceeded
from infrastructure.db import InMemoryKeyValueStore, SupabaseKeyValueStore
from infrastructure.db.supabase_key_value_store import _escape_like


# ---------------------------------------------------------------------------
# InMemoryKeyValueStore
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestInMemoryKeyValueStore:
    def test_round_trip_returns_copies(self):
        store = InMemoryKeyValueStore()
        value = {"a": [1, 2]}
        store.set("k", value)

        loaded = store.get("k")
        loaded["a"].append(3)

        assert store.get("k") == {"a": [1, 2]}

    def test_missing_key(self):
        assert InMemoryKeyValueStore().get("nope") is None

    def test_keys_by_prefix(self):
        store = InMemoryKeyValueStore()
        store.set("plan:p-1:2024-03-01", {})
        store.set("plan:p-2:2024-03-01", {})
        store.set("progression:p-1", {})

        assert sorted(store.keys("plan:")) == ["plan:p-1:2024-03-01", "plan:p-2:2024-03-01"]
        assert len(store.keys()) == 3

    def test_quota_rejects_oversized_write_and_keeps_old_value(self):
        store = InMemoryKeyValueStore(max_bytes=40)
        store.set("k", "small")

        with pytest.raises(StorageQuotaExceeded):
            store.set("k", "x" * 100)

        assert store.get("k") == "small"

    def test_overwrite_accounts_for_replaced_value(self):
        store = InMemoryKeyValueStore(max_bytes=30)
        store.set("k", "x" * 20)
        # Same size again fits because the old value is released
        store.set("k", "y" * 20)
        assert store.get("k") == "y" * 20

    def test_delete_releases_bytes(self):
        store = InMemoryKeyValueStore()
        store.set("k", "value")
        assert store.used_bytes > 0

        store.delete("k")
        store.delete("k")

        assert store.used_bytes == 0
        assert store.get("k") is None

    def test_unbounded(self):
        store = InMemoryKeyValueStore(max_bytes=None)
        store.set("k", "x" * 100_000)
        assert len(store.get("k")) == 100_000


# ---------------------------------------------------------------------------
# SupabaseKeyValueStore
# ---------------------------------------------------------------------------


class PostgrestLikeError(Exception):
    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


@pytest.fixture
def supabase_client():
    return MagicMock()


@pytest.mark.unit
class TestSupabaseKeyValueStore:
    def test_get_returns_value(self, supabase_client):
        table = supabase_client.table.return_value
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = (
            MagicMock(data=[{"value": {"xp": 10}}])
        )

        store = SupabaseKeyValueStore(supabase_client)

        assert store.get("progression:p-1") == {"xp": 10}
        supabase_client.table.assert_called_with("kv_store")
        table.select.return_value.eq.assert_called_with("key", "progression:p-1")

    def test_get_missing(self, supabase_client):
        table = supabase_client.table.return_value
        table.select.return_value.eq.return_value.limit.return_value.execute.return_value = (
            MagicMock(data=[])
        )
        assert SupabaseKeyValueStore(supabase_client).get("k") is None

    def test_get_error_reads_as_absent(self, supabase_client):
        supabase_client.table.side_effect = Exception("connection reset")
        assert SupabaseKeyValueStore(supabase_client).get("k") is None

    def test_set_upserts_row(self, supabase_client):
        store = SupabaseKeyValueStore(supabase_client, table="custom")

        store.set("k", {"a": 1})

        supabase_client.table.assert_called_with("custom")
        row = supabase_client.table.return_value.upsert.call_args[0][0]
        assert row["key"] == "k"
        assert row["value"] == {"a": 1}
        assert "updated_at" in row

    def test_set_quota_error(self, supabase_client):
        supabase_client.table.return_value.upsert.return_value.execute.side_effect = (
            PostgrestLikeError("could not extend file", "53100")
        )

        with pytest.raises(StorageQuotaExceeded):
            SupabaseKeyValueStore(supabase_client).set("k", 1)

    def test_set_other_error(self, supabase_client):
        supabase_client.table.return_value.upsert.return_value.execute.side_effect = (
            PostgrestLikeError("permission denied", "42501")
        )

        with pytest.raises(StorageError) as exc_info:
            SupabaseKeyValueStore(supabase_client).set("k", 1)
        assert not isinstance(exc_info.value, StorageQuotaExceeded)

    def test_keys_with_prefix(self, supabase_client):
        query = supabase_client.table.return_value.select.return_value
        query.like.return_value.execute.return_value = MagicMock(
            data=[{"key": "plan:p_1:2024-03-01"}]
        )

        keys = SupabaseKeyValueStore(supabase_client).keys("plan:p_1:")

        assert keys == ["plan:p_1:2024-03-01"]
        query.like.assert_called_with("key", "plan:p\\_1:%")

    def test_keys_error_is_empty(self, supabase_client):
        supabase_client.table.side_effect = Exception("boom")
        assert SupabaseKeyValueStore(supabase_client).keys() == []

    def test_escape_like(self):
        assert _escape_like("50%_off\\") == "50\\%\\_off\\\\"
