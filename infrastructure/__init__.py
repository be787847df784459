"""
Infrastructure Layer for the FitLife workout API.

Part of FL-3: Persistence layer

This package contains concrete implementations of the application ports:
- db/: Key-value store backends (in-memory, Supabase)
- cache_store: TTL cache, plan and progression storage over a key-value store
- wger_client: HTTP client for the wger exercise catalog
- fallback_catalog: Bundled offline exercise dataset
"""

from infrastructure.cache_store import CacheStore
from infrastructure.db import InMemoryKeyValueStore, SupabaseKeyValueStore
from infrastructure.fallback_catalog import FallbackCatalog
from infrastructure.wger_client import WgerCatalogClient

__all__ = [
    "CacheStore",
    "InMemoryKeyValueStore",
    "SupabaseKeyValueStore",
    "FallbackCatalog",
    "WgerCatalogClient",
]
