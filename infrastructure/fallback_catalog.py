"""
Bundled fallback exercise dataset.

Part of FL-6: Exercise acquisition pipeline

When the network catalog is unreachable, times out or returns nothing, the
acquisition pipeline serves exercises from a curated, bilingual dataset
shipped with the package. The dataset is grouped by environment archetype
and loaded lazily, once per FallbackCatalog instance.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from domain.models import (
    EquipmentItem,
    ExerciseCategory,
    ExerciseRecord,
    Muscle,
    Provenance,
)

logger = logging.getLogger(__name__)

DEFAULT_DATASET_PATH = Path(__file__).parent / "data" / "fallback_exercises.json"

DEFAULT_ARCHETYPE = "bodyweight"

ARCHETYPE_BY_ENVIRONMENT: Dict[str, str] = {
    "home_no_equipment": "bodyweight",
    "home_gym": "home_gym",
    "outdoor": "outdoor",
    "calisthenics": "calisthenics",
}

HEBREW = "he"


def archetype_for(environment: str) -> str:
    """Map an environment to its fallback archetype (bodyweight if unknown)."""
    return ARCHETYPE_BY_ENVIRONMENT.get(environment, DEFAULT_ARCHETYPE)


class FallbackCatalog:
    """
    Read-only access to the bundled fallback dataset.

    Example:
        >>> catalog = FallbackCatalog()
        >>> records = catalog.get_exercises("outdoor", "legs", language="en")
        >>> all(r.provenance == Provenance.FALLBACK for r in records)
        True
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path) if path else DEFAULT_DATASET_PATH
        self._archetypes: Optional[Dict[str, List[Dict[str, Any]]]] = None
        self._version: Optional[int] = None

    @property
    def version(self) -> Optional[int]:
        self._load()
        return self._version

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if self._archetypes is not None:
            return self._archetypes

        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
            archetypes = data["archetypes"]
            if not isinstance(archetypes, dict):
                raise ValueError("'archetypes' must be an object")
            self._archetypes = dict(archetypes)
            self._version = data.get("version")
            logger.info(
                f"Loaded fallback dataset v{data.get('version')} from {self._path}"
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to load fallback dataset from {self._path}: {e}")
            self._archetypes = {}

        return self._archetypes

    def raw_pool(self, environment: str) -> List[Dict[str, Any]]:
        """
        Raw records for an environment's archetype.

        An archetype missing from the dataset falls back to the bodyweight
        pool; a dataset that failed to load yields an empty list.
        """
        archetypes = self._load()
        pool = archetypes.get(archetype_for(environment))
        if pool is None:
            pool = archetypes.get(DEFAULT_ARCHETYPE)
        return list(pool or [])

    def get_exercises(
        self,
        environment: str,
        category_key: str,
        language: str = "en",
    ) -> List[ExerciseRecord]:
        """
        Fallback exercises for an environment and category.

        Records whose English category label contains the category key
        (case-insensitive) are kept. The cardio category matches every
        record. If nothing matches, the whole archetype pool is returned.

        Args:
            environment: Workout environment
            category_key: Rotation category (e.g., "chest")
            language: Display language; "he" switches to the Hebrew fields

        Returns:
            Normalized records with fallback provenance
        """
        pool = self.raw_pool(environment)
        wanted = category_key.lower()

        matching = [
            raw
            for raw in pool
            if wanted in str((raw.get("category") or {}).get("name", "")).lower()
            or wanted == "cardio"
        ]
        selected = matching if matching else pool

        records = []
        for raw in selected:
            try:
                records.append(_to_record(raw, language))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed fallback record {raw.get('id')}: {e}")
        return records


def _localized(raw: Dict[str, Any], field: str, language: str) -> Any:
    if language == HEBREW and raw.get(f"{field}_he"):
        return raw[f"{field}_he"]
    return raw.get(field)


def _to_record(raw: Dict[str, Any], language: str) -> ExerciseRecord:
    category = raw.get("category") or {}
    return ExerciseRecord(
        id=str(raw["id"]),
        provenance=Provenance.FALLBACK,
        name=_localized(raw, "name", language) or "Exercise",
        description=_localized(raw, "description", language) or "",
        category=ExerciseCategory(
            id=category.get("id", 0),
            name=_localized(category, "name", language) or "General",
        ),
        primary_muscles=[Muscle(**m) for m in raw.get("muscles", [])],
        secondary_muscles=[Muscle(**m) for m in raw.get("muscles_secondary", [])],
        equipment=[EquipmentItem(**e) for e in raw.get("equipment", [])],
        image_url=raw.get("image_url"),
        duration_seconds=raw.get("duration_seconds"),
        high_impact=bool(raw.get("high_impact", False)),
    )
