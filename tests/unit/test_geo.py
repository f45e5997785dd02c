"""
Unit tests for geographic helpers.
"""
import pytest

import sys
sys.path.insert(0, 'src')

from voyager.geo import Coordinate, distance_miles, haversine_distance, span_for_miles


class TestDistance:
    """Tests for great-circle distances."""

    def test_same_point(self):
        assert haversine_distance(45.5, -122.6, 45.5, -122.6) == 0

    def test_portland_to_seattle(self):
        """Roughly 145 miles apart."""
        portland = Coordinate(45.5152, -122.6784)
        seattle = Coordinate(47.6062, -122.3321)
        assert 140 < distance_miles(portland, seattle) < 150

    def test_one_degree_latitude(self):
        assert distance_miles(Coordinate(0, 0), Coordinate(1, 0)) == pytest.approx(69.1, abs=0.1)


class TestSpanForMiles:
    """Tests for span_for_miles."""

    def test_equator(self):
        lat_delta, lon_delta = span_for_miles(69.0, 0.0)
        assert lat_delta == pytest.approx(1.0)
        assert lon_delta == pytest.approx(1.0)

    def test_longitude_widens_with_latitude(self):
        lat_delta, lon_delta = span_for_miles(69.0, 60.0)
        assert lat_delta == pytest.approx(1.0)
        assert lon_delta == pytest.approx(2.0)

    def test_minimum_span(self):
        assert span_for_miles(0.0, 45.0) == (0.01, 0.01)
