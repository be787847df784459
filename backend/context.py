"""
Process-scoped application context.

Part of FL-4: Dependency-injected service context

Everything with process lifetime (the storage backend, the catalog client,
the fallback dataset memo) is built once here and handed to the components
that need it. create_app() stores the context on app.state; tests build
their own with fakes.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from supabase import create_client

from application.ports import ExerciseCatalog, KeyValueStore
from backend.core.acquisition import ExerciseAcquisitionPipeline
from backend.core.gamification import GamificationEngine
from backend.core.plan_generator import WorkoutPlanGenerator
from backend.settings import Settings
from infrastructure import (
    CacheStore,
    FallbackCatalog,
    InMemoryKeyValueStore,
    SupabaseKeyValueStore,
    WgerCatalogClient,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Components shared by every request."""

    settings: Settings
    store: KeyValueStore
    cache: CacheStore
    catalog: ExerciseCatalog
    fallback: FallbackCatalog
    pipeline: ExerciseAcquisitionPipeline
    generator: WorkoutPlanGenerator
    gamification: GamificationEngine


def build_store(settings: Settings) -> KeyValueStore:
    """Create the configured key-value backend."""
    if settings.storage_backend == "supabase":
        if settings.supabase_url and settings.supabase_service_role_key:
            client = create_client(settings.supabase_url, settings.supabase_service_role_key)
            logger.info("Using Supabase key-value store")
            return SupabaseKeyValueStore(client, table=settings.supabase_table)
        logger.warning(
            "storage_backend=supabase but Supabase credentials are missing; "
            "falling back to the in-memory store"
        )
    return InMemoryKeyValueStore(max_bytes=settings.storage_quota_bytes)


def build_context(
    settings: Settings,
    store: Optional[KeyValueStore] = None,
    catalog: Optional[ExerciseCatalog] = None,
    fallback: Optional[FallbackCatalog] = None,
) -> AppContext:
    """
    Wire the core components together.

    Args:
        settings: Application settings
        store: Key-value backend; built from settings when omitted
        catalog: Exercise catalog; the wger client when omitted
        fallback: Fallback dataset; the bundled one when omitted

    Returns:
        A ready-to-use AppContext
    """
    store = store if store is not None else build_store(settings)
    catalog = catalog if catalog is not None else WgerCatalogClient(
        base_url=settings.catalog_base_url,
        timeout=settings.catalog_timeout_seconds,
    )
    fallback = fallback if fallback is not None else FallbackCatalog(
        settings.fallback_dataset_path
    )

    cache = CacheStore(
        store,
        ttl_seconds=settings.exercise_cache_ttl_seconds,
        retention_days=settings.plan_retention_days,
    )
    pipeline = ExerciseAcquisitionPipeline(
        catalog,
        cache,
        fallback,
        timeout_seconds=settings.catalog_timeout_seconds,
        page_size=settings.catalog_page_size,
        locale=lambda: settings.display_language,
    )

    return AppContext(
        settings=settings,
        store=store,
        cache=cache,
        catalog=catalog,
        fallback=fallback,
        pipeline=pipeline,
        generator=WorkoutPlanGenerator(pipeline, cache),
        gamification=GamificationEngine(cache),
    )
