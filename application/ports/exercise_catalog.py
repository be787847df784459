"""
Exercise catalog port (interface).

Part of FL-6: Exercise acquisition pipeline

The network exercise catalog is read-only and unreliable. The acquisition
pipeline depends on this Protocol instead of the concrete HTTP client so
tests can swap in fakes that fail, hang or return canned payloads.
"""

from typing import Any, Dict, List, Protocol, Sequence


class ExerciseCatalog(Protocol):
    """Read-only query interface to a remote exercise catalog."""

    async def fetch_exercises(
        self,
        equipment_ids: Sequence[int],
        category_id: int,
        language_id: int,
        limit: int = 25,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Fetch raw exercise records for a category/equipment combination.

        Args:
            equipment_ids: Equipment identifiers the exercises may use
            category_id: Catalog category identifier
            language_id: Catalog language identifier for translations
            limit: Page size
            offset: Page offset

        Returns:
            Raw (un-normalized) exercise dictionaries

        Raises:
            CatalogClientError: On any transport or API failure
        """
        ...
