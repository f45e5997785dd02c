"""
Unit tests for seed categories, instant matching and the place catalog.
"""
import pytest

import sys
sys.path.insert(0, 'src')

from voyager.geo import Coordinate
from voyager.seed_categories import (
    ALL_CATEGORIES,
    DEFAULT_SEED_PLACES,
    PlaceCatalog,
    PlaceCategory,
    category_from_token,
    match_instant_category,
)

LAVA_TUBE = Coordinate(44.1000, -121.3000)


# =============================================================================
# Test PlaceCategory
# =============================================================================

class TestPlaceCategory:
    """Tests for PlaceCategory properties."""

    def test_default_radii(self):
        assert PlaceCategory.GHOST_TOWN.default_radius_miles == 150.0
        assert PlaceCategory.VIEWPOINT.default_radius_miles == 50.0
        assert PlaceCategory.CAVE.default_radius_miles == 50.0

    def test_tokens(self):
        assert [c.token for c in PlaceCategory] == ["ghost", "cave", "viewpoint"]

    def test_all_categories(self):
        assert ALL_CATEGORIES == {PlaceCategory.GHOST_TOWN, PlaceCategory.CAVE, PlaceCategory.VIEWPOINT}


# =============================================================================
# Test match_instant_category
# =============================================================================

class TestMatchInstantCategory:
    """Tests for the keyword short-circuit."""

    @pytest.mark.parametrize("query,expected", [
        ("ghost towns", PlaceCategory.GHOST_TOWN),
        ("ghost towns within 150 miles", PlaceCategory.GHOST_TOWN),
        ("viewpoints", PlaceCategory.VIEWPOINT),
        ("view points near bend", PlaceCategory.VIEWPOINT),
        ("scenic overlooks", PlaceCategory.VIEWPOINT),
        ("caves", PlaceCategory.CAVE),
        ("Lava CAVES", PlaceCategory.CAVE),
    ])
    def test_keyword_hits(self, query, expected):
        assert match_instant_category(query) == expected

    def test_priority_ghost_first(self):
        assert match_instant_category("ghost caves") == PlaceCategory.GHOST_TOWN

    def test_priority_viewpoint_before_cave(self):
        assert match_instant_category("scenic cave") == PlaceCategory.VIEWPOINT

    def test_no_match(self):
        assert match_instant_category("starbucks") is None


# =============================================================================
# Test category_from_token
# =============================================================================

class TestCategoryFromToken:
    """Tests for mapping interpreter replies to categories."""

    @pytest.mark.parametrize("reply,expected", [
        ("ghost", PlaceCategory.GHOST_TOWN),
        ("cave", PlaceCategory.CAVE),
        ("viewpoint", PlaceCategory.VIEWPOINT),
        ("  Viewpoint\n", PlaceCategory.VIEWPOINT),
        ('"cave".', PlaceCategory.CAVE),
    ])
    def test_exact_tokens(self, reply, expected):
        assert category_from_token(reply) == expected

    @pytest.mark.parametrize("reply", ["ghost towns near bend", "caves", "starbucks seattle", ""])
    def test_search_phrases(self, reply):
        assert category_from_token(reply) is None


# =============================================================================
# Test PlaceCatalog
# =============================================================================

class TestPlaceCatalog:
    """Tests for the seed place catalog."""

    def test_defaults(self):
        catalog = PlaceCatalog()
        assert [p.name for p in catalog.places] == ["Garnet Ghost Town", "Zigzag Overlook", "Lava Tube"]

    def test_by_categories(self):
        catalog = PlaceCatalog()
        caves = catalog.by_categories({PlaceCategory.CAVE})
        assert [p.name for p in caves] == ["Lava Tube"]
        assert len(catalog.by_categories(ALL_CATEGORIES)) == 3

    def test_within_radius(self):
        catalog = PlaceCatalog()
        nearby = catalog.within(50.0, LAVA_TUBE, ALL_CATEGORIES)
        assert [p.name for p in nearby] == ["Lava Tube"]

    def test_within_is_inclusive(self):
        catalog = PlaceCatalog()
        assert len(catalog.within(0.0, LAVA_TUBE, {PlaceCategory.CAVE})) == 1

    def test_within_respects_categories(self):
        catalog = PlaceCatalog()
        assert catalog.within(5000.0, LAVA_TUBE, {PlaceCategory.VIEWPOINT})[0].name == "Zigzag Overlook"

    def test_seed_place_to_dict(self):
        data = DEFAULT_SEED_PLACES[0].to_dict()
        assert data["category"] == "ghost_town"
        assert data["category_name"] == "Ghost Town"
        assert data["coordinate"] == {"lat": 46.8347, "lon": -113.3575}
        assert data["links"] == ["https://en.wikipedia.org/wiki/Garnet,_Montana"]
