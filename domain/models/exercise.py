"""
Exercise record value object.

Part of FL-2: Define workout domain models

An ExerciseRecord is the normalized form of a catalog entry, regardless of
whether it came from the live network catalog or the bundled fallback
dataset. Records are frozen once normalized.
"""

from enum import Enum
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Provenance(str, Enum):
    """Where an exercise record came from."""

    NETWORK = "network"
    FALLBACK = "fallback"


class ExerciseCategory(BaseModel):
    """Muscle-group category label."""

    model_config = ConfigDict(frozen=True)

    id: int = 0
    name: str = "General"


class Muscle(BaseModel):
    """A muscle reference."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class EquipmentItem(BaseModel):
    """A piece of equipment referenced by an exercise."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class ExerciseRecord(BaseModel):
    """
    A normalized exercise.

    Examples:
        >>> record = ExerciseRecord(
        ...     id="push-ups",
        ...     provenance=Provenance.FALLBACK,
        ...     name="Push-ups",
        ...     category=ExerciseCategory(id=11, name="Chest"),
        ... )
        >>> record.is_timed
        False
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    provenance: Provenance
    name: str = "Exercise"
    description: str = ""
    category: ExerciseCategory = Field(default_factory=ExerciseCategory)
    primary_muscles: List[Muscle] = Field(default_factory=list)
    secondary_muscles: List[Muscle] = Field(default_factory=list)
    equipment: List[EquipmentItem] = Field(default_factory=list)
    image_url: Optional[str] = None
    duration_seconds: Optional[int] = Field(
        default=None, ge=1, description="Set for timed exercises"
    )
    high_impact: bool = Field(
        default=False, description="Jumping/plyometric moves filtered out for minors"
    )

    @property
    def is_timed(self) -> bool:
        """Check if the exercise is performed for time rather than reps."""
        return self.duration_seconds is not None

    @computed_field
    @property
    def tutorial_url(self) -> str:
        """YouTube search link for a proper-form tutorial."""
        query = quote_plus(f"how to {self.name} exercise proper form")
        return f"https://www.youtube.com/results?search_query={query}"
