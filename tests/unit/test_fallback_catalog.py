"""
Unit tests for the bundled fallback dataset.

FL-6: Exercise acquisition pipeline
"""

import json

import pytest

from domain.models import Provenance
from infrastructure.fallback_catalog import FallbackCatalog, archetype_for


@pytest.fixture
def small_dataset(tmp_path):
    data = {
        "version": 3,
        "archetypes": {
            "bodyweight": [
                {
                    "id": "bw-1",
                    "name": "Push-up",
                    "name_he": "שכיבת סמיכה",
                    "description": "Press up",
                    "description_he": "דחיפה",
                    "category": {"id": 11, "name": "Chest", "name_he": "חזה"},
                    "high_impact": False,
                },
                {
                    "id": "bw-2",
                    "name": "Squat",
                    "category": {"id": 9, "name": "Legs", "name_he": "רגליים"},
                },
                {
                    "id": "bw-3",
                    "name": "Jumping Jacks",
                    "category": {"id": 15, "name": "Cardio"},
                    "duration_seconds": 45,
                    "high_impact": True,
                },
            ],
        },
    }
    path = tmp_path / "fallback.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.mark.unit
class TestArchetypeFor:
    @pytest.mark.parametrize(
        "environment,archetype",
        [
            ("home_no_equipment", "bodyweight"),
            ("home_gym", "home_gym"),
            ("outdoor", "outdoor"),
            ("calisthenics", "calisthenics"),
            ("moon_base", "bodyweight"),
        ],
    )
    def test_mapping(self, environment, archetype):
        assert archetype_for(environment) == archetype


@pytest.mark.unit
class TestFallbackCatalog:
    def test_filters_by_category_label(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)

        records = catalog.get_exercises("home_no_equipment", "chest")

        assert [r.id for r in records] == ["bw-1"]
        assert records[0].provenance == Provenance.FALLBACK

    def test_filter_is_case_insensitive_substring(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)
        assert [r.id for r in catalog.get_exercises("home_no_equipment", "LEG")] == ["bw-2"]

    def test_cardio_matches_every_record(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)
        assert len(catalog.get_exercises("home_no_equipment", "cardio")) == 3

    def test_no_match_returns_whole_pool(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)
        assert len(catalog.get_exercises("home_no_equipment", "shoulders")) == 3

    def test_missing_archetype_uses_bodyweight(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)
        assert [r.id for r in catalog.get_exercises("home_gym", "chest")] == ["bw-1"]

    def test_hebrew_substitution(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)

        record = catalog.get_exercises("home_no_equipment", "chest", language="he")[0]

        assert record.name == "שכיבת סמיכה"
        assert record.description == "דחיפה"
        assert record.category.name == "חזה"

    def test_hebrew_falls_back_to_english_fields(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)

        record = catalog.get_exercises("home_no_equipment", "legs", language="he")[0]

        assert record.name == "Squat"
        assert record.category.name == "רגליים"

    def test_filters_on_english_label_even_in_hebrew(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)
        assert [r.id for r in catalog.get_exercises("home_no_equipment", "chest", "he")] == ["bw-1"]

    def test_timed_and_high_impact_fields(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)

        jacks = next(r for r in catalog.get_exercises("outdoor", "cardio") if r.id == "bw-3")

        assert jacks.is_timed
        assert jacks.duration_seconds == 45
        assert jacks.high_impact

    def test_loads_once(self, small_dataset):
        catalog = FallbackCatalog(small_dataset)
        catalog.get_exercises("home_no_equipment", "chest")

        small_dataset.unlink()

        assert len(catalog.get_exercises("home_no_equipment", "cardio")) == 3
        assert catalog.version == 3

    def test_missing_file_yields_empty_pools(self, tmp_path):
        catalog = FallbackCatalog(tmp_path / "missing.json")

        assert catalog.get_exercises("home_no_equipment", "chest") == []
        assert catalog.version is None

    def test_corrupt_file_yields_empty_pools(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert FallbackCatalog(path).get_exercises("outdoor", "legs") == []


@pytest.mark.unit
class TestBundledDataset:
    """The shipped dataset covers every archetype and category."""

    @pytest.mark.parametrize(
        "environment", ["home_no_equipment", "home_gym", "outdoor", "calisthenics"]
    )
    @pytest.mark.parametrize(
        "category", ["chest", "arms", "back", "shoulders", "legs", "calves", "abs", "cardio"]
    )
    def test_every_pool_is_non_empty(self, fallback, environment, category):
        assert len(fallback.get_exercises(environment, category)) > 0

    def test_ids_are_unique_per_archetype(self, fallback):
        for environment in ["home_no_equipment", "home_gym", "outdoor", "calisthenics"]:
            ids = [raw["id"] for raw in fallback.raw_pool(environment)]
            assert len(ids) == len(set(ids))

    def test_every_record_has_hebrew_fields(self, fallback):
        for environment in ["home_no_equipment", "home_gym", "outdoor", "calisthenics"]:
            for raw in fallback.raw_pool(environment):
                assert raw["name_he"]
                assert raw["description_he"]
                assert raw["category"]["name_he"]

    def test_version(self, fallback):
        assert fallback.version == 1
