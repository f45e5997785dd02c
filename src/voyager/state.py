"""
Voice Routing State Definitions

Coordinates, search hits, the Intent variants produced by one routing
attempt, and the PresentationState the map renderer reads.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union

from voyager.geo import Coordinate
from voyager.seed_categories import PlaceCategory, ALL_CATEGORIES, DEFAULT_RADIUS_MILES


@dataclass(frozen=True)
class SearchResult:
    """One local search hit, in the order the provider ranked it."""
    name: str
    coordinate: Coordinate
    address: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "coordinate": self.coordinate.to_dict(),
        }
        if self.address:
            result["address"] = self.address
        return result


# =============================================================================
# Intent variants
# =============================================================================

@dataclass(frozen=True)
class SeedCategoryIntent:
    """Show one built-in seed category around a center."""
    category: PlaceCategory
    radius_miles: float
    center: Optional[Coordinate] = None


@dataclass(frozen=True)
class LocalSearchIntent:
    """Run a local search for term, biased toward center_hint.

    When recenter is set the center hint is pinned as the map center before
    the search runs (it came from a geocoded place name).
    """
    term: str
    center_hint: Optional[Coordinate] = None
    recenter: bool = False


@dataclass(frozen=True)
class NavigateIntent:
    """Resolve term to a destination and publish a driving directions link."""
    term: str
    center_hint: Optional[Coordinate] = None


@dataclass(frozen=True)
class OpenMapOnlyIntent:
    """Just show the map."""


@dataclass(frozen=True)
class NoOpIntent:
    """Nothing to do."""


Intent = Union[SeedCategoryIntent, LocalSearchIntent, NavigateIntent, OpenMapOnlyIntent, NoOpIntent]


def intent_kind(intent: Intent) -> str:
    """Short, stable name for an intent variant (used in logs and responses)."""
    return {
        SeedCategoryIntent: "seed_category",
        LocalSearchIntent: "local_search",
        NavigateIntent: "navigate",
        OpenMapOnlyIntent: "open_map",
        NoOpIntent: "noop",
    }[type(intent)]


def intent_to_dict(intent: Intent) -> Dict[str, Any]:
    data: Dict[str, Any] = {"kind": intent_kind(intent)}
    if isinstance(intent, SeedCategoryIntent):
        data["category"] = intent.category.value
        data["radius_miles"] = intent.radius_miles
        data["center"] = intent.center.to_dict() if intent.center else None
    elif isinstance(intent, (LocalSearchIntent, NavigateIntent)):
        data["term"] = intent.term
        data["center_hint"] = intent.center_hint.to_dict() if intent.center_hint else None
    return data


# =============================================================================
# Presentation
# =============================================================================

class RouteOutcome(str, Enum):
    """How a routing attempt terminated."""
    IGNORED = "ignored"        # empty, no wake word, trivial
    SUPPRESSED = "suppressed"  # debounce rejected a repeat
    APPLIED = "applied"        # presentation state updated
    STALE = "stale"            # superseded by a newer attempt, discarded


@dataclass
class PresentationState:
    """What the map renderer shows. Only the router writes to it."""
    category_filter: FrozenSet[PlaceCategory] = ALL_CATEGORIES
    radius_miles: Optional[float] = DEFAULT_RADIUS_MILES
    center_override: Optional[Coordinate] = None
    map_visible: bool = False
    results: List[SearchResult] = field(default_factory=list)
    navigation_url: Optional[str] = None

    def copy(self) -> "PresentationState":
        return PresentationState(
            category_filter=self.category_filter,
            radius_miles=self.radius_miles,
            center_override=self.center_override,
            map_visible=self.map_visible,
            results=list(self.results),
            navigation_url=self.navigation_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category_filter": sorted(c.value for c in self.category_filter),
            "radius_miles": self.radius_miles,
            "center_override": self.center_override.to_dict() if self.center_override else None,
            "map_visible": self.map_visible,
            "results": [r.to_dict() for r in self.results],
            "navigation_url": self.navigation_url,
        }


@dataclass
class RouteResult:
    """Return value of one routing attempt."""
    outcome: RouteOutcome
    presentation: PresentationState
    intent: Optional[Intent] = None
    query: Optional[str] = None
    fallback_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "query": self.query,
            "intent": intent_to_dict(self.intent) if self.intent is not None else None,
            "fallback_reason": self.fallback_reason,
            "presentation": self.presentation.to_dict(),
        }
