"""
HTTP client for the wger exercise catalog.

Part of FL-6: Exercise acquisition pipeline

This client queries the public wger REST API for exercises matching a
category and an equipment list. It only reports failures; falling back to
local data is the acquisition pipeline's job.
"""

import logging
from typing import Any, Dict, List, Sequence

import httpx

from application.exceptions import CatalogAPIError, CatalogUnavailable

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://wger.de/api/v2"


class WgerCatalogClient:
    """
    HTTP client for wger's /exerciseinfo endpoint.

    Satisfies the ExerciseCatalog port.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
    ):
        """
        Initialize the catalog client.

        Args:
            base_url: Base URL of the wger API (e.g., "https://wger.de/api/v2")
            timeout: Transport timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def fetch_exercises(
        self,
        equipment_ids: Sequence[int],
        category_id: int,
        language_id: int,
        limit: int = 25,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Fetch raw exercise records.

        Args:
            equipment_ids: wger equipment ids
            category_id: wger category id
            language_id: wger language id used for translations
            limit: Page size
            offset: Page offset

        Returns:
            The raw ``results`` list from the API

        Raises:
            CatalogUnavailable: If the catalog is not reachable
            CatalogAPIError: If the catalog returns an error response
        """
        url = f"{self._base_url}/exerciseinfo/"
        params = {
            "format": "json",
            "language": language_id,
            "equipment": ",".join(str(i) for i in equipment_ids),
            "category": category_id,
            "limit": limit,
            "offset": offset,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, params=params)

                if response.status_code != 200:
                    logger.error(
                        f"Catalog error: {response.status_code} - {response.text[:200]}"
                    )
                    raise CatalogAPIError(
                        f"Failed to fetch exercises: HTTP {response.status_code}",
                        response.status_code,
                    )

                try:
                    data = response.json()
                except ValueError as e:
                    raise CatalogAPIError(
                        "Catalog returned a malformed body", response.status_code
                    ) from e

        except httpx.ConnectError as e:
            logger.warning(f"Catalog unavailable: {e}")
            raise CatalogUnavailable(
                f"Exercise catalog is not available at {self._base_url}"
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(f"Catalog timeout: {e}")
            raise CatalogUnavailable("Exercise catalog request timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"Catalog transport error: {e}")
            raise CatalogUnavailable(f"Exercise catalog request failed: {e}") from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise CatalogAPIError("Catalog response has no results list", 200)
        return results
