"""
Application-layer exceptions.

Part of FL-14: Storage quota handling

These exceptions are shared by the application and infrastructure layers.
Only PersistenceError is meant to reach the HTTP layer; the rest are
recovered inside the component that raises them.
"""


class StorageError(Exception):
    """Base class for key-value storage failures."""

    pass


class StorageQuotaExceeded(StorageError):
    """Raised by a key-value backend when a write does not fit.

    The cache store reacts to this by pruning old entries and retrying
    the write once.
    """

    pass


class PersistenceError(StorageError):
    """A plan or progression state could not be saved.

    Raised after the prune-and-retry pass has also failed. Carries a short
    diagnostic suitable for a "could not save" message.
    """

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key


class CatalogClientError(Exception):
    """Base exception for exercise catalog failures."""

    pass


class CatalogUnavailable(CatalogClientError):
    """Raised when the catalog cannot be reached or times out."""

    pass


class CatalogAPIError(CatalogClientError):
    """Raised when the catalog returns an error or an unreadable body."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
