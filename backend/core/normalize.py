"""
Normalization of raw wger catalog records.

Part of FL-6: Exercise acquisition pipeline

wger returns one record per exercise with a list of translations. We pick the
translation for the display language (falling back to the first one), strip
HTML from the description and flatten the nested references.
"""

import re
from typing import Any, Dict, List, Optional

from domain.models import (
    EquipmentItem,
    ExerciseCategory,
    ExerciseRecord,
    Muscle,
    Provenance,
)

# wger language ids
WGER_LANGUAGE_IDS: Dict[str, int] = {
    "de": 1,
    "en": 2,
    "es": 4,
    "fr": 12,
    "it": 13,
}
DEFAULT_LANGUAGE_ID = WGER_LANGUAGE_IDS["en"]

_TAG_RE = re.compile(r"<[^>]+>")


def language_id_for(language: str) -> int:
    """wger language id for a display language (English if unsupported)."""
    return WGER_LANGUAGE_IDS.get(language.split("-")[0].lower(), DEFAULT_LANGUAGE_ID)


def strip_markup(text: Optional[str]) -> str:
    """Remove HTML tags and surrounding whitespace."""
    if not text:
        return ""
    return _TAG_RE.sub("", text).strip()


def pick_translation(
    translations: List[Dict[str, Any]], language_id: int
) -> Dict[str, Any]:
    """The translation in the given language, else the first one, else {}."""
    translations = [t for t in translations if isinstance(t, dict)]
    for translation in translations:
        if translation.get("language") == language_id:
            return translation
    return translations[0] if translations else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _muscles(raw: List[Dict[str, Any]]) -> List[Muscle]:
    return [
        Muscle(id=m["id"], name=m.get("name_en") or m.get("name") or "")
        for m in raw
        if isinstance(m, dict) and "id" in m
    ]


def normalize_wger_exercise(
    raw: Dict[str, Any], language_id: int = DEFAULT_LANGUAGE_ID
) -> ExerciseRecord:
    """
    Convert a raw /exerciseinfo record into an ExerciseRecord.

    Args:
        raw: One element of the API's ``results`` list
        language_id: wger id of the display language

    Returns:
        A record with network provenance

    Raises:
        TypeError: If the record is not a JSON object
        KeyError: If the record has no id
    """
    if not isinstance(raw, dict):
        raise TypeError(f"Expected an exercise object, got {type(raw).__name__}")

    translation = pick_translation(_as_list(raw.get("translations")), language_id)
    category = _as_dict(raw.get("category"))
    images = [i for i in _as_list(raw.get("images")) if isinstance(i, dict)]

    return ExerciseRecord(
        id=str(raw["id"]),
        provenance=Provenance.NETWORK,
        name=translation.get("name") or raw.get("name") or "Exercise",
        description=strip_markup(translation.get("description")),
        category=ExerciseCategory(
            id=category.get("id", 0),
            name=category.get("name") or "General",
        ),
        primary_muscles=_muscles(_as_list(raw.get("muscles"))),
        secondary_muscles=_muscles(_as_list(raw.get("muscles_secondary"))),
        equipment=[
            EquipmentItem(id=e["id"], name=e.get("name", ""))
            for e in _as_list(raw.get("equipment"))
            if isinstance(e, dict) and "id" in e
        ],
        image_url=images[0].get("image") if images else None,
    )
