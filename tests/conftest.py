"""
Pytest fixtures for the FitLife workout API tests.

Part of FL-1: Test scaffold
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Ensure the repository root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from backend.context import AppContext, build_context
from backend.main import create_app
from backend.settings import Settings
from domain.models import Profile
from infrastructure import CacheStore, FallbackCatalog, InMemoryKeyValueStore
from tests.fakes import FakeExerciseCatalog, FrozenClock


# ---------------------------------------------------------------------------
# Settings and Clock
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with an in-memory store and a short catalog deadline."""
    return Settings(
        _env_file=None,
        environment="test",
        storage_backend="memory",
        catalog_timeout_seconds=0.2,
    )


@pytest.fixture
def clock() -> FrozenClock:
    """A controllable clock starting on Monday 2024-03-04, 09:00 UTC."""
    return FrozenClock(datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc))


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(store, clock) -> CacheStore:
    return CacheStore(store, clock=clock)


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------


@pytest.fixture
def catalog() -> FakeExerciseCatalog:
    return FakeExerciseCatalog()


@pytest.fixture
def fallback() -> FallbackCatalog:
    return FallbackCatalog()


# ---------------------------------------------------------------------------
# Domain Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def profile() -> Profile:
    return Profile(
        id="p-1",
        name="Dana",
        age=34,
        fitness_level="beginner",
        default_environment="home_no_equipment",
    )


@pytest.fixture
def youth_profile() -> Profile:
    return Profile(
        id="kid-1",
        name="Noa",
        age=12,
        fitness_level="advanced",
        default_environment="home_no_equipment",
    )


# ---------------------------------------------------------------------------
# Test App and Client
# ---------------------------------------------------------------------------


@pytest.fixture
def context(test_settings, store, catalog, fallback) -> AppContext:
    """Application context wired with fakes."""
    return build_context(test_settings, store=store, catalog=catalog, fallback=fallback)


@pytest.fixture
def app(test_settings, context):
    """Create test application instance."""
    return create_app(settings=test_settings, context=context)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """
    Per-test FastAPI TestClient.
    Properly cleans up dependency overrides after each test.
    """
    yield TestClient(app)
    app.dependency_overrides.clear()
