"""Built-in seed categories and the seed place catalog.

Seed categories (ghost towns, caves, viewpoints) are local data, not search
results. A keyword hit on one of them short-circuits voice routing: no
remote interpretation, no search.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple

import structlog

from voyager.geo import Coordinate, distance_miles

logger = structlog.get_logger("voyager.seed_categories")


class PlaceCategory(str, Enum):
    """Seed categories rendered from local data."""
    GHOST_TOWN = "ghost_town"
    CAVE = "cave"
    VIEWPOINT = "viewpoint"

    @property
    def token(self) -> str:
        """Canonical token the remote interpreter answers with."""
        return _TOKENS[self]

    @property
    def default_radius_miles(self) -> float:
        return _DEFAULT_RADII[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_TOKENS = {
    PlaceCategory.GHOST_TOWN: "ghost",
    PlaceCategory.CAVE: "cave",
    PlaceCategory.VIEWPOINT: "viewpoint",
}

_DEFAULT_RADII = {
    PlaceCategory.GHOST_TOWN: 150.0,
    PlaceCategory.CAVE: 50.0,
    PlaceCategory.VIEWPOINT: 50.0,
}

_DISPLAY_NAMES = {
    PlaceCategory.GHOST_TOWN: "Ghost Town",
    PlaceCategory.CAVE: "Cave",
    PlaceCategory.VIEWPOINT: "Viewpoint",
}

ALL_CATEGORIES: FrozenSet[PlaceCategory] = frozenset(PlaceCategory)

# Radius shown before any command narrows the map
DEFAULT_RADIUS_MILES = 50.0

# Keyword containment checks, in priority order; first match wins
INSTANT_KEYWORDS: Tuple[Tuple[PlaceCategory, Tuple[str, ...]], ...] = (
    (PlaceCategory.GHOST_TOWN, ("ghost",)),
    (PlaceCategory.VIEWPOINT, ("viewpoint", "view point", "scenic")),
    (PlaceCategory.CAVE, ("cave",)),
)


def match_instant_category(query: str) -> Optional[PlaceCategory]:
    """Keyword short-circuit for built-in categories.

    Pure containment check on the stripped query. No radius parsing happens
    here: "ghost towns within 150 miles" gets the category default radius.
    """
    lowered = query.lower()
    for category, keywords in INSTANT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return None


def category_from_token(text: str) -> Optional[PlaceCategory]:
    """Map an interpreter reply to a category when it is exactly a token.

    Surrounding quotes, whitespace and a trailing period are tolerated;
    anything else ("ghost towns near bend") is a search phrase.
    """
    token = text.strip().rstrip(".").strip("\"'`").strip().rstrip(".").lower()
    for category in PlaceCategory:
        if token == category.token:
            return category
    return None


# =============================================================================
# Seed place catalog
# =============================================================================

@dataclass(frozen=True)
class SeedPlace:
    """A built-in place rendered as a pin for its category."""
    name: str
    category: PlaceCategory
    coordinate: Coordinate
    blurb: str
    links: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category.value,
            "category_name": self.category.display_name,
            "coordinate": self.coordinate.to_dict(),
            "blurb": self.blurb,
            "links": list(self.links),
        }


DEFAULT_SEED_PLACES: Tuple[SeedPlace, ...] = (
    SeedPlace(
        name="Garnet Ghost Town",
        category=PlaceCategory.GHOST_TOWN,
        coordinate=Coordinate(46.8347, -113.3575),
        blurb="Well-preserved Montana gold-rush town from the 1890s.",
        links=("https://en.wikipedia.org/wiki/Garnet,_Montana",),
    ),
    SeedPlace(
        name="Zigzag Overlook",
        category=PlaceCategory.VIEWPOINT,
        coordinate=Coordinate(45.3342, -121.9562),
        blurb="Roadside viewpoint for Mt. Hood and Zigzag River canyon.",
    ),
    SeedPlace(
        name="Lava Tube",
        category=PlaceCategory.CAVE,
        coordinate=Coordinate(44.1000, -121.3000),
        blurb="Lava tube cave system; helmet and lights recommended.",
        links=("https://www.fs.usda.gov",),
    ),
)


@dataclass
class PlaceCatalog:
    """In-memory catalog of seed places."""
    places: List[SeedPlace] = field(default_factory=lambda: list(DEFAULT_SEED_PLACES))

    def by_categories(self, categories: Iterable[PlaceCategory]) -> List[SeedPlace]:
        wanted = set(categories)
        return [p for p in self.places if p.category in wanted]

    def within(
        self,
        radius_miles: float,
        center: Coordinate,
        categories: Iterable[PlaceCategory],
    ) -> List[SeedPlace]:
        """Places of the given categories no farther than radius_miles from center."""
        matches = [
            p for p in self.by_categories(categories)
            if distance_miles(p.coordinate, center) <= radius_miles
        ]
        logger.debug("seed_places_within", radius_miles=radius_miles, count=len(matches))
        return matches
