"""
Equipment resolution.

Part of FL-5: Environment and accessory selection

Maps a workout environment plus the accessories a user has at hand to the
set of wger equipment ids used to query the catalog. Resolution is total:
unknown environments and accessories never raise.
"""

from typing import Dict, Iterable, List, Optional, Tuple

# wger equipment ids
BODYWEIGHT = 7
DUMBBELL = 3
GYM_MAT = 4
PULL_UP_BAR = 6
KETTLEBELL = 10
RESISTANCE_BAND = 11

EquipmentSet = Tuple[int, ...]

ENVIRONMENT_EQUIPMENT: Dict[str, List[int]] = {
    "home_no_equipment": [BODYWEIGHT],
    "home_gym": [BODYWEIGHT, DUMBBELL, RESISTANCE_BAND],
    "outdoor": [BODYWEIGHT, GYM_MAT],
    "calisthenics": [BODYWEIGHT, PULL_UP_BAR, GYM_MAT],
}

DEFAULT_EQUIPMENT: List[int] = [BODYWEIGHT]

# wger has no dedicated ids for benches, rings or parallel bars, so they map
# onto the closest existing item.
ACCESSORY_EQUIPMENT: Dict[str, int] = {
    "dumbbell": DUMBBELL,
    "resistance_band": RESISTANCE_BAND,
    "pullup_bar": PULL_UP_BAR,
    "kettlebell": KETTLEBELL,
    "mat": GYM_MAT,
    "bench": DUMBBELL,
    "rings": PULL_UP_BAR,
    "parallel_bars": PULL_UP_BAR,
}


def resolve_equipment(
    environment: str,
    accessories: Optional[Iterable[str]] = None,
) -> EquipmentSet:
    """
    Resolve the equipment ids available for a session.

    Args:
        environment: Workout environment (unknown values get bodyweight only)
        accessories: Accessory keys layered on top; unknown keys are ignored

    Returns:
        Sorted, duplicate-free, non-empty tuple of equipment ids

    Examples:
        >>> resolve_equipment("home_gym")
        (3, 7, 11)
        >>> resolve_equipment("outdoor", ["kettlebell", "mat", "unknown"])
        (4, 7, 10)
        >>> resolve_equipment("space_station")
        (7,)
    """
    ids = set(ENVIRONMENT_EQUIPMENT.get(environment, DEFAULT_EQUIPMENT))
    for accessory in accessories or []:
        equipment_id = ACCESSORY_EQUIPMENT.get(accessory)
        if equipment_id is not None:
            ids.add(equipment_id)
    return tuple(sorted(ids))
