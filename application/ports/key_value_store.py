"""
Key-value store port (interface).

Part of FL-3: Persistence layer

This Protocol is the generic persistence primitive the cache store is built
on. Values are JSON-compatible Python objects (dicts, lists, scalars).
"""

from typing import Any, List, Optional, Protocol


class KeyValueStore(Protocol):
    """
    Repository interface for raw key-value persistence.

    Implementations must raise StorageQuotaExceeded from set() when the
    write fails because of capacity pressure. Other read failures should be
    logged and reported as a missing value.
    """

    def get(self, key: str) -> Optional[Any]:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            The stored value, or None if absent or unreadable
        """
        ...

    def set(self, key: str, value: Any) -> None:
        """
        Write a value, replacing any existing one.

        Args:
            key: Storage key
            value: JSON-compatible value

        Raises:
            StorageQuotaExceeded: If the backend is out of capacity
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        ...

    def keys(self, prefix: str = "") -> List[str]:
        """
        List stored keys.

        Args:
            prefix: Only return keys starting with this prefix

        Returns:
            Matching keys, in no particular order
        """
        ...
