"""
Infrastructure Storage Backends.

Part of FL-3: Persistence layer

This package provides implementations of the KeyValueStore port defined in
application.ports.

Usage:
    from supabase import create_client
    from infrastructure.db import InMemoryKeyValueStore, SupabaseKeyValueStore

    # Process-local store with a 5 MB quota
    store = InMemoryKeyValueStore(max_bytes=5 * 1024 * 1024)

    # Supabase-backed store
    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    store = SupabaseKeyValueStore(client)
"""

from infrastructure.db.memory_key_value_store import InMemoryKeyValueStore
from infrastructure.db.supabase_key_value_store import SupabaseKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "SupabaseKeyValueStore",
]
