"""
Google Places API (New) text search provider.

Runs free-text local searches ("starbucks", "powell's books") biased to a
circle around the map center.

API Documentation: https://developers.google.com/maps/documentation/places/web-service/text-search
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from shared.errors import ProviderError
from voyager.geo import Coordinate, METERS_PER_MILE
from voyager.state import SearchResult

from .base import SearchProvider

logger = structlog.get_logger("voyager.providers.google_places")

# Places API caps a bias circle at 50 km
MAX_BIAS_RADIUS_METERS = 50000.0

DEFAULT_BIAS_RADIUS_MILES = 25.0

# Places API max page size
MAX_RESULT_COUNT = 20


class GooglePlacesSearchProvider(SearchProvider):
    """Local search via places:searchText."""

    BASE_URL = "https://places.googleapis.com/v1/places:searchText"
    FIELD_MASK = "places.displayName,places.formattedAddress,places.location"

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            api_key: Google Places API key
            client: Shared HTTP client (one is created when omitted)
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def name(self) -> str:
        return "google_places"

    def _build_request(
        self,
        query: str,
        center: Optional[Coordinate],
        radius_miles: Optional[float],
        limit: int,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "textQuery": query,
            "maxResultCount": max(1, min(limit, MAX_RESULT_COUNT)),
        }
        if center is not None:
            radius_meters = (radius_miles or DEFAULT_BIAS_RADIUS_MILES) * METERS_PER_MILE
            body["locationBias"] = {
                "circle": {
                    "center": {"latitude": center.lat, "longitude": center.lon},
                    "radius": min(radius_meters, MAX_BIAS_RADIUS_METERS),
                }
            }
        return body

    async def search(
        self,
        query: str,
        center: Optional[Coordinate] = None,
        radius_miles: Optional[float] = None,
        limit: int = 10,
    ) -> List[SearchResult]:
        if not self.api_key:
            logger.warning("places_api_key_not_configured", query=query)
            return []

        headers = {
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": self.FIELD_MASK,
        }

        try:
            response = await self.client.post(
                self.BASE_URL,
                json=self._build_request(query, center, radius_miles, limit),
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise ProviderError(self.name, detail=str(e))

        if response.status_code != 200:
            raise ProviderError(self.name, detail=f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(self.name, detail=f"Invalid JSON: {e}")

        results = []
        for place in data.get("places", [])[:limit]:
            location = place.get("location") or {}
            if "latitude" not in location or "longitude" not in location:
                continue
            results.append(SearchResult(
                name=(place.get("displayName") or {}).get("text") or "Result",
                coordinate=Coordinate(lat=location["latitude"], lon=location["longitude"]),
                address=place.get("formattedAddress"),
            ))

        logger.info("places_search_complete", query=query, count=len(results))
        return results
