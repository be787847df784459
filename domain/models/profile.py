"""
Profile and environment value objects.

Part of FL-2: Define workout domain models

Profiles are owned by the profile-management collaborator. The core only
reads them; the adaptive difficulty lives in ProgressionState instead.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Environment(str, Enum):
    """Workout settings that gate the available equipment."""

    HOME_NO_EQUIPMENT = "home_no_equipment"
    HOME_GYM = "home_gym"
    OUTDOOR = "outdoor"
    CALISTHENICS = "calisthenics"


class FitnessLevel(str, Enum):
    """Self-reported fitness level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


DEFAULT_ENVIRONMENT = Environment.HOME_NO_EQUIPMENT.value


class Profile(BaseModel):
    """
    A family member's profile, as supplied by the caller.

    Environment and fitness level are kept as plain strings so that values
    from newer clients never fail validation; unknown values fall back to
    safe defaults during generation.
    """

    id: str = Field(..., min_length=1)
    name: str = "User"
    age: int = Field(default=25, ge=0, le=120)
    fitness_level: str = FitnessLevel.BEGINNER.value
    default_environment: str = DEFAULT_ENVIRONMENT
    goals: List[str] = Field(default_factory=lambda: ["stay_active"])


class SessionOverride(BaseModel):
    """Per-session environment/accessory choice made before a workout."""

    environment: Optional[str] = None
    accessories: List[str] = Field(default_factory=list)
