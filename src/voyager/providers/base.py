"""
Base classes for the geocoding and local search boundaries.

The router only talks to these interfaces; concrete providers wrap a
specific HTTP API.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from voyager.geo import Coordinate
from voyager.state import SearchResult


class Geocoder(ABC):
    """Resolves a free-text place name to a coordinate."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier (e.g., 'nominatim')."""
        pass

    @abstractmethod
    async def geocode(self, place: str) -> Optional[Coordinate]:
        """
        Resolve a place name.

        Args:
            place: Free-text place name ("portland", "crater lake")

        Returns:
            Coordinate of the best match, or None if nothing matched

        Raises:
            ProviderError: If the backend fails (caller should handle gracefully)
        """
        pass


class SearchProvider(ABC):
    """Runs a points-of-interest search near an optional center."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier (e.g., 'google_places')."""
        pass

    @abstractmethod
    async def search(
        self,
        query: str,
        center: Optional[Coordinate] = None,
        radius_miles: Optional[float] = None,
        limit: int = 10,
    ) -> List[SearchResult]:
        """
        Execute a local search and return ranked results.

        Args:
            query: Free-text search query
            center: Optional coordinate to bias results toward
            radius_miles: Optional bias radius around center
            limit: Maximum number of results

        Returns:
            Ordered list of SearchResult objects (possibly empty)

        Raises:
            ProviderError: If the search fails (caller should handle gracefully)
        """
        pass
