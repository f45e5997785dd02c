"""Voyager Voice Routing Service

Turns live speech transcripts into map presentation state for a
map-exploration client.

Endpoints:
- GET /health - Health check
- POST /v1/transcript - Route one transcript update
- POST /v1/intent - Execute a structured map command
- POST /v1/location - Update the device location
- GET /v1/presentation - Current presentation state
- POST /v1/presentation/dismiss - Hide the map
- GET /v1/places - Seed places for the current map
- GET /metrics - Prometheus metrics
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field
from starlette.responses import Response

from shared.config import get_config
from shared.errors import ServiceUnavailableError, register_exception_handlers
from shared.logging_config import configure_logging
from voyager import __version__
from voyager.commands import MapCommand, intent_from_command
from voyager.geo import Coordinate, span_for_miles
from voyager.interpreter import MissingCredentialError, RemoteInterpreter
from voyager.providers import GooglePlacesSearchProvider, NominatimGeocoder
from voyager.router import IntentRouter
from voyager.seed_categories import PlaceCatalog

# Configure logging
logger = configure_logging("voyager")

SERVICE_NAME = "voyager"
SERVICE_VERSION = __version__

# Global clients
http_client: Optional[httpx.AsyncClient] = None
interpreter: Optional[RemoteInterpreter] = None
intent_router: Optional[IntentRouter] = None
place_catalog = PlaceCatalog()


class TranscriptRequest(BaseModel):
    transcript: str = Field(..., description="Latest recognized speech, full text")


class LocationRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global http_client, interpreter, intent_router

    config = get_config()
    config.validate_or_exit(SERVICE_NAME)

    logger.info("Starting Voyager voice routing service")

    http_client = httpx.AsyncClient(timeout=config.provider_timeout_seconds)

    try:
        interpreter = RemoteInterpreter.from_config(config, client=http_client)
    except MissingCredentialError as e:
        logger.error("interpreter_disabled", error=e.message)
        interpreter = None

    intent_router = IntentRouter.from_config(
        config,
        search_provider=GooglePlacesSearchProvider(config.google_places_api_key, client=http_client),
        geocoder=NominatimGeocoder(
            base_url=config.nominatim_url,
            user_agent=config.geocoder_user_agent,
            client=http_client,
        ),
        interpreter=interpreter,
    )

    yield

    logger.info("Shutting down Voyager voice routing service")
    if interpreter:
        await interpreter.close()
    if http_client:
        await http_client.aclose()
    intent_router = None


app = FastAPI(
    title="Voyager Voice Routing Service",
    description="Voice-to-intent routing for map exploration",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

register_exception_handlers(app)


def get_router() -> IntentRouter:
    if intent_router is None:
        raise ServiceUnavailableError("Router not initialized")
    return intent_router


@app.get("/health")
async def health_check(router: IntentRouter = Depends(get_router)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "interpreter_configured": router.interpreter is not None,
        "circuit_breaker": router.circuit_breaker.get_status() if router.circuit_breaker else None,
    }


@app.post("/v1/transcript")
async def route_transcript(request: TranscriptRequest, router: IntentRouter = Depends(get_router)):
    """Route one transcript update. Ignored utterances still return 200."""
    result = await router.route(request.transcript)
    return result.to_dict()


@app.post("/v1/intent")
async def execute_intent(command: MapCommand, router: IntentRouter = Depends(get_router)):
    """Execute a structured map command."""
    intent = intent_from_command(command, fallback_center=router.center_hint())
    result = await router.execute(intent)
    return result.to_dict()


@app.post("/v1/location")
async def update_location(request: LocationRequest, router: IntentRouter = Depends(get_router)):
    """Update the last known device location."""
    router.update_device_location(Coordinate(lat=request.lat, lon=request.lon))
    return {"device_location": router.device_location.to_dict()}


@app.get("/v1/presentation")
async def get_presentation(router: IntentRouter = Depends(get_router)):
    """Current presentation state for the map renderer."""
    return router.presentation.to_dict()


@app.post("/v1/presentation/dismiss")
async def dismiss_map(router: IntentRouter = Depends(get_router)):
    """The map was closed on the client."""
    return router.dismiss_map().to_dict()


@app.get("/v1/places")
async def get_places(router: IntentRouter = Depends(get_router)):
    """Seed places matching the current filter, within the radius when centered."""
    state = router.presentation
    center = router.center_hint()

    if center is not None and state.radius_miles is not None:
        places = place_catalog.within(state.radius_miles, center, state.category_filter)
        lat_delta, lon_delta = span_for_miles(state.radius_miles, center.lat)
        region = {"center": center.to_dict(), "lat_delta": lat_delta, "lon_delta": lon_delta}
    else:
        places = place_catalog.by_categories(state.category_filter)
        region = None

    return {
        "places": [p.to_dict() for p in places],
        "radius_miles": state.radius_miles,
        "region": region,
    }


@app.get("/metrics")
async def metrics_endpoint():
    """Prometheus metrics endpoint."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_config().service_port)
