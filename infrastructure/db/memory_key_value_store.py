"""
In-memory key-value store with a byte quota.

Part of FL-3: Persistence layer

Values are kept JSON-encoded, the same way a browser's localStorage keeps
them, so the quota is measured on the serialized size and callers never
share mutable objects with the store.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from application.exceptions import StorageQuotaExceeded

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class InMemoryKeyValueStore:
    """
    Process-local implementation of KeyValueStore.

    Writes that would push the total size past ``max_bytes`` raise
    StorageQuotaExceeded and leave the previous value in place.
    """

    def __init__(self, max_bytes: Optional[int] = DEFAULT_QUOTA_BYTES):
        """
        Initialize an empty store.

        Args:
            max_bytes: Capacity in bytes (keys plus encoded values), or None
                for unbounded
        """
        self._data: Dict[str, str] = {}
        self._max_bytes = max_bytes
        self._used_bytes = 0

    @staticmethod
    def _entry_size(key: str, encoded: str) -> int:
        return len(key.encode("utf-8")) + len(encoded.encode("utf-8"))

    @property
    def used_bytes(self) -> int:
        """Current serialized size of all entries."""
        return self._used_bytes

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Failed to read '{key}': {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value, separators=(",", ":"))
        new_size = self._entry_size(key, encoded)
        old_size = self._entry_size(key, self._data[key]) if key in self._data else 0
        projected = self._used_bytes - old_size + new_size

        if self._max_bytes is not None and projected > self._max_bytes:
            raise StorageQuotaExceeded(
                f"Writing '{key}' needs {projected} bytes, quota is {self._max_bytes}"
            )

        self._data[key] = encoded
        self._used_bytes = projected

    def delete(self, key: str) -> None:
        raw = self._data.pop(key, None)
        if raw is not None:
            self._used_bytes -= self._entry_size(key, raw)

    def keys(self, prefix: str = "") -> List[str]:
        return [k for k in self._data if k.startswith(prefix)]
