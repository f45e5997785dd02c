"""
Structured map commands.

Thin clients (quick buttons, a model that emits JSON actions) send a
command object instead of a transcript:

    {"action": "showSeedCategory", "category": "ghostTown", "radiusMiles": 150}
    {"action": "localSearch", "query": "seattle starbucks"}
    {"action": "navigateTo", "query": "powell's books"}
    {"action": "openMap"}
    {"action": "noop"}
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import BadRequestError
from voyager.geo import Coordinate
from voyager.seed_categories import PlaceCategory
from voyager.state import (
    Intent,
    LocalSearchIntent,
    NavigateIntent,
    NoOpIntent,
    OpenMapOnlyIntent,
    SeedCategoryIntent,
)

CommandAction = Literal["showSeedCategory", "localSearch", "openMap", "navigateTo", "noop"]

# Accepted spellings for each category
_CATEGORY_ALIASES = {
    "ghosttown": PlaceCategory.GHOST_TOWN,
    "ghost_town": PlaceCategory.GHOST_TOWN,
    "ghost": PlaceCategory.GHOST_TOWN,
    "cave": PlaceCategory.CAVE,
    "viewpoint": PlaceCategory.VIEWPOINT,
}


class MapCommand(BaseModel):
    """A structured command, in the field names clients send."""

    model_config = ConfigDict(populate_by_name=True)

    action: CommandAction
    category: Optional[str] = None
    radius_miles: Optional[float] = Field(None, alias="radiusMiles", gt=0)
    query: Optional[str] = None
    center_lat: Optional[float] = Field(None, alias="centerLat", ge=-90, le=90)
    center_lon: Optional[float] = Field(None, alias="centerLon", ge=-180, le=180)
    meta: Optional[str] = None

    @property
    def center(self) -> Optional[Coordinate]:
        if self.center_lat is not None and self.center_lon is not None:
            return Coordinate(lat=self.center_lat, lon=self.center_lon)
        return None


def parse_category(value: str) -> PlaceCategory:
    category = _CATEGORY_ALIASES.get(value.strip().lower().replace(" ", "_"))
    if category is None:
        raise BadRequestError(
            "Unknown category",
            detail=f"'{value}' is not one of ghostTown, cave, viewpoint",
        )
    return category


def intent_from_command(command: MapCommand, fallback_center: Optional[Coordinate] = None) -> Intent:
    """
    Convert a structured command into an Intent.

    Args:
        command: Parsed command
        fallback_center: Center used when the command carries none

    Raises:
        BadRequestError: If a field required by the action is missing
    """
    center = command.center or fallback_center

    if command.action == "showSeedCategory":
        if not command.category:
            raise BadRequestError("Invalid command", detail="'category' is required for showSeedCategory")
        category = parse_category(command.category)
        return SeedCategoryIntent(
            category=category,
            radius_miles=command.radius_miles or category.default_radius_miles,
            center=center,
        )

    if command.action in ("localSearch", "navigateTo"):
        query = (command.query or "").strip()
        if not query:
            raise BadRequestError("Invalid command", detail=f"'query' is required for {command.action}")
        if command.action == "localSearch":
            return LocalSearchIntent(term=query, center_hint=center)
        return NavigateIntent(term=query, center_hint=center)

    if command.action == "openMap":
        return OpenMapOnlyIntent()

    return NoOpIntent()
