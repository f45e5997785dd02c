"""
OpenStreetMap Nominatim geocoder.

Free forward geocoding; the usage policy requires an identifying
User-Agent and at most one request per second.
"""

from typing import Optional

import httpx
import structlog

from shared.errors import ProviderError
from voyager.geo import Coordinate

from .base import Geocoder

logger = structlog.get_logger("voyager.providers.nominatim")


class NominatimGeocoder(Geocoder):
    """Geocoder backed by the Nominatim /search endpoint."""

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "Voyager/1.0",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def name(self) -> str:
        return "nominatim"

    async def geocode(self, place: str) -> Optional[Coordinate]:
        try:
            response = await self.client.get(
                f"{self.base_url}/search",
                params={"q": place, "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent},
            )
        except httpx.HTTPError as e:
            raise ProviderError(self.name, detail=str(e))

        if response.status_code != 200:
            raise ProviderError(self.name, detail=f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(self.name, detail=f"Invalid JSON: {e}")

        if not isinstance(data, list):
            raise ProviderError(self.name, detail=f"Unexpected response type: {type(data).__name__}")

        if not data:
            logger.info("geocode_no_match", place=place)
            return None

        item = data[0]
        try:
            coordinate = Coordinate(lat=float(item["lat"]), lon=float(item["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(self.name, detail=f"Unexpected result shape: {e}")

        logger.info("geocode_match", place=place, display_name=item.get("display_name", ""))
        return coordinate
