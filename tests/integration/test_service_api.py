"""
Integration tests for the Voyager HTTP surface.

The app runs in-process through FastAPI's TestClient with the router
dependency overridden, so no external service is contacted.
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

import sys
sys.path.insert(0, 'src')

from voyager.geo import Coordinate
from voyager.main import app, get_router
from voyager.router import IntentRouter
from voyager.state import SearchResult

LAVA_TUBE = {"lat": 44.1, "lon": -121.3}
STARBUCKS = SearchResult("Starbucks", Coordinate(45.519, -122.679))


@pytest.fixture
def router():
    search_provider = AsyncMock()
    search_provider.search.return_value = [STARBUCKS]
    return IntentRouter(search_provider=search_provider, interpreter=None)


@pytest.fixture
def client(router):
    app.dependency_overrides[get_router] = lambda: router
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Tests for /health."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "voyager"
        assert body["interpreter_configured"] is False
        assert body["circuit_breaker"] is None

    def test_router_not_initialized(self):
        response = TestClient(app).get("/health")
        assert response.status_code == 503
        body = response.json()
        assert body["error"] is True
        assert body["code"] == "SERVICE_UNAVAILABLE"


# =============================================================================
# Transcripts
# =============================================================================

class TestTranscript:
    """Tests for POST /v1/transcript."""

    def test_instant_category(self, client):
        response = client.post("/v1/transcript", json={"transcript": "Show me ghost towns"})
        assert response.status_code == 200
        body = response.json()
        assert body["outcome"] == "applied"
        assert body["query"] == "ghost towns"
        assert body["intent"]["kind"] == "seed_category"
        assert body["presentation"]["category_filter"] == ["ghost_town"]
        assert body["presentation"]["radius_miles"] == 150.0
        assert body["presentation"]["map_visible"] is True

    def test_fallback_search(self, client):
        body = client.post("/v1/transcript", json={"transcript": "show me starbucks near me"}).json()
        assert body["outcome"] == "applied"
        assert body["fallback_reason"] == "missing_credential"
        assert body["intent"] == {"kind": "local_search", "term": "starbucks", "center_hint": None}
        assert body["presentation"]["results"][0]["name"] == "Starbucks"

    def test_ignored_is_not_an_error(self, client):
        response = client.post("/v1/transcript", json={"transcript": "hello there"})
        assert response.status_code == 200
        assert response.json()["outcome"] == "ignored"

    def test_suppressed_repeat(self, client):
        client.post("/v1/transcript", json={"transcript": "show me caves"})
        body = client.post("/v1/transcript", json={"transcript": "show me caves"}).json()
        assert body["outcome"] == "suppressed"

    def test_missing_transcript(self, client):
        assert client.post("/v1/transcript", json={}).status_code == 422


# =============================================================================
# Structured commands
# =============================================================================

class TestIntentCommand:
    """Tests for POST /v1/intent."""

    def test_seed_category(self, client):
        body = client.post("/v1/intent", json={"action": "showSeedCategory", "category": "viewpoint"}).json()
        assert body["outcome"] == "applied"
        assert body["presentation"]["category_filter"] == ["viewpoint"]
        assert body["presentation"]["radius_miles"] == 50.0

    def test_navigate(self, client):
        body = client.post("/v1/intent", json={"action": "navigateTo", "query": "starbucks"}).json()
        assert body["intent"]["kind"] == "navigate"
        assert body["presentation"]["navigation_url"].startswith("https://maps.apple.com/")

    def test_missing_query(self, client):
        response = client.post("/v1/intent", json={"action": "localSearch"})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "BAD_REQUEST"
        assert "query" in body["detail"]

    def test_unknown_category(self, client):
        response = client.post("/v1/intent", json={"action": "showSeedCategory", "category": "dragons"})
        assert response.status_code == 400

    def test_unknown_action(self, client):
        assert client.post("/v1/intent", json={"action": "fly"}).status_code == 422

    def test_noop(self, client):
        assert client.post("/v1/intent", json={"action": "noop"}).json()["outcome"] == "ignored"


# =============================================================================
# Location, presentation and places
# =============================================================================

class TestPresentation:
    """Tests for location, presentation and places endpoints."""

    def test_update_location(self, client, router):
        response = client.post("/v1/location", json=LAVA_TUBE)
        assert response.status_code == 200
        assert response.json() == {"device_location": LAVA_TUBE}
        assert router.device_location == Coordinate(44.1, -121.3)

    def test_invalid_location(self, client):
        assert client.post("/v1/location", json={"lat": 120, "lon": 0}).status_code == 422

    def test_presentation_and_dismiss(self, client):
        client.post("/v1/intent", json={"action": "openMap"})
        assert client.get("/v1/presentation").json()["map_visible"] is True

        dismissed = client.post("/v1/presentation/dismiss").json()
        assert dismissed["map_visible"] is False
        assert client.get("/v1/presentation").json()["map_visible"] is False

    def test_places_without_center(self, client):
        body = client.get("/v1/places").json()
        assert len(body["places"]) == 3
        assert body["region"] is None

    def test_places_within_radius(self, client):
        client.post("/v1/location", json=LAVA_TUBE)
        client.post("/v1/intent", json={"action": "showSeedCategory", "category": "cave"})

        body = client.get("/v1/places").json()
        assert [p["name"] for p in body["places"]] == ["Lava Tube"]
        assert body["radius_miles"] == 50.0
        assert body["region"]["center"] == LAVA_TUBE
        assert body["region"]["lat_delta"] == pytest.approx(50.0 / 69.0)

    def test_metrics(self, client):
        client.post("/v1/transcript", json={"transcript": "show me caves"})
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "voyager_route_attempts_total" in response.text
