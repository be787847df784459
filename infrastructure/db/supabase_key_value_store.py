"""
Supabase Key-Value Store Implementation.

Part of FL-3: Persistence layer

This module implements the KeyValueStore protocol on a single Supabase
table holding one JSONB document per key:

    create table kv_store (
        key text primary key,
        value jsonb not null,
        updated_at timestamptz not null default now()
    );
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from supabase import Client

from application.exceptions import StorageError, StorageQuotaExceeded

logger = logging.getLogger(__name__)

TABLE_NAME = "kv_store"

# Postgres error classes that mean "no room left"
# 53100 disk_full, 53200 out_of_memory, 54000 program_limit_exceeded
QUOTA_ERROR_CODES = {"53100", "53200", "54000"}


class SupabaseKeyValueStore:
    """
    Supabase implementation of KeyValueStore.

    Reads degrade to "absent" on any backend error. Writes surface capacity
    errors as StorageQuotaExceeded so the cache store can prune and retry.
    """

    def __init__(self, client: Client, table: str = TABLE_NAME):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
            table: Table holding the key/value rows
        """
        self._client = client
        self._table = table

    def get(self, key: str) -> Optional[Any]:
        try:
            result = self._client.table(self._table) \
                .select("value") \
                .eq("key", key) \
                .limit(1) \
                .execute()
        except Exception as e:
            logger.warning(f"Failed to read '{key}': {e}")
            return None

        if not result.data:
            return None
        return result.data[0].get("value")

    def set(self, key: str, value: Any) -> None:
        row = {
            "key": key,
            "value": value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self._client.table(self._table).upsert(row).execute()
        except Exception as e:
            code = str(getattr(e, "code", "") or "")
            if code in QUOTA_ERROR_CODES:
                raise StorageQuotaExceeded(f"Storage full while writing '{key}'") from e
            logger.error(f"Failed to write '{key}': {e}")
            raise StorageError(f"Failed to write '{key}'") from e

    def delete(self, key: str) -> None:
        try:
            self._client.table(self._table).delete().eq("key", key).execute()
        except Exception as e:
            logger.warning(f"Failed to delete '{key}': {e}")

    def keys(self, prefix: str = "") -> List[str]:
        try:
            query = self._client.table(self._table).select("key")
            if prefix:
                query = query.like("key", f"{_escape_like(prefix)}%")
            result = query.execute()
        except Exception as e:
            logger.warning(f"Failed to list keys with prefix '{prefix}': {e}")
            return []

        return [row["key"] for row in result.data or []]


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so prefixes match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
