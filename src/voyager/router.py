"""
Voice-to-intent routing.

One IntentRouter owns the debounce state and the presentation state. Every
transcript update becomes one routing attempt:

    normalize -> strip wake word -> debounce
      -> instant category match                      (no network)
      -> remote interpretation
           -> category token                         (no search)
           -> search phrase -> place name? -> geocode -> local search
      -> on any interpreter failure: local search on the stripped query

Attempts may overlap while a slow interpreter or search call is in flight.
Each accepted attempt takes a sequence number, and its effect is committed
only if no newer attempt was accepted in the meantime, so a slow earlier
attempt can never overwrite what a later one produced.
"""

import time
from typing import Callable, List, Optional, Tuple

import structlog

from shared.config import VoyagerConfig
from shared.errors import ProviderError
from voyager import metrics
from voyager.circuit_breaker import CircuitBreaker
from voyager.debounce import DebounceGuard
from voyager.geo import Coordinate
from voyager.interpreter import (
    InterpreterError,
    InterpreterUnavailableError,
    MissingCredentialError,
    RemoteInterpreter,
)
from voyager.location_splitter import split_location
from voyager.navigator import build_navigation_url
from voyager.normalizer import normalize_transcript, strip_wake_word
from voyager.providers.base import Geocoder, SearchProvider
from voyager.seed_categories import PlaceCategory, category_from_token, match_instant_category
from voyager.state import (
    Intent,
    LocalSearchIntent,
    NavigateIntent,
    NoOpIntent,
    OpenMapOnlyIntent,
    PresentationState,
    RouteOutcome,
    RouteResult,
    SearchResult,
    SeedCategoryIntent,
    intent_kind,
)

logger = structlog.get_logger("voyager.router")

# Radius after centering on a search hit, so the new pins are on screen
SEARCH_RESULT_RADIUS_MILES = 25.0

Effect = Callable[[PresentationState], None]


class IntentRouter:
    """
    Routes transcripts to intents and owns the resulting PresentationState.

    Usage:
        router = IntentRouter(search_provider=places, geocoder=nominatim,
                              interpreter=interpreter)
        router.update_device_location(Coordinate(45.52, -122.68))

        result = await router.route("show me coffee in portland")
        result.presentation.map_visible  # True
    """

    def __init__(
        self,
        search_provider: SearchProvider,
        geocoder: Optional[Geocoder] = None,
        interpreter: Optional[RemoteInterpreter] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        debounce: Optional[DebounceGuard] = None,
        nav_app: str = "apple",
        search_radius_miles: float = SEARCH_RESULT_RADIUS_MILES,
        search_limit: int = 10,
    ):
        self.search_provider = search_provider
        self.geocoder = geocoder
        self.interpreter = interpreter
        self.circuit_breaker = circuit_breaker
        self.debounce = debounce or DebounceGuard()
        self.nav_app = nav_app
        self.search_radius_miles = search_radius_miles
        self.search_limit = search_limit

        self.device_location: Optional[Coordinate] = None
        self._presentation = PresentationState()
        self._seq = 0

    @classmethod
    def from_config(
        cls,
        config: VoyagerConfig,
        search_provider: SearchProvider,
        geocoder: Optional[Geocoder] = None,
        interpreter: Optional[RemoteInterpreter] = None,
    ) -> "IntentRouter":
        return cls(
            search_provider=search_provider,
            geocoder=geocoder,
            interpreter=interpreter,
            circuit_breaker=CircuitBreaker(
                failure_threshold=config.llm_circuit_failure_threshold,
                recovery_timeout=config.llm_circuit_recovery_seconds,
            ),
            debounce=DebounceGuard(
                window_seconds=config.debounce_window_seconds,
                min_length=config.min_query_length,
            ),
            nav_app=config.nav_app,
            search_radius_miles=config.search_radius_miles,
            search_limit=config.search_result_limit,
        )

    # =========================================================================
    # State accessors
    # =========================================================================

    @property
    def presentation(self) -> PresentationState:
        """Snapshot of the current presentation state."""
        return self._presentation.copy()

    def center_hint(self) -> Optional[Coordinate]:
        """Pinned map center, else the last known device location."""
        return self._presentation.center_override or self.device_location

    def update_device_location(self, coordinate: Coordinate) -> None:
        self.device_location = coordinate
        logger.debug("device_location_updated", lat=coordinate.lat, lon=coordinate.lon)

    def dismiss_map(self) -> PresentationState:
        """The map sheet was closed."""
        self._presentation.map_visible = False
        return self.presentation

    # =========================================================================
    # Routing
    # =========================================================================

    async def route(self, transcript: str) -> RouteResult:
        """
        Route one transcript update.

        Ignored and debounced utterances return without touching the
        presentation state. Every accepted utterance ends with the map
        visible, whatever failed along the way.
        """
        text = normalize_transcript(transcript)
        if not text:
            return self._finish(RouteOutcome.IGNORED)

        logger.debug("voice_heard", transcript=text)

        stripped = strip_wake_word(text)
        if stripped is None:
            return self._finish(RouteOutcome.IGNORED, query=text)

        if self.debounce.is_trivial(stripped):
            return self._finish(RouteOutcome.IGNORED, query=stripped)

        if not self.debounce.accept(stripped):
            return self._finish(RouteOutcome.SUPPRESSED, query=stripped)

        seq = self._next_seq()
        logger.info("voice_route_dispatched", query=stripped, seq=seq)

        category = match_instant_category(stripped)
        if category is not None:
            logger.info("voice_route_instant_match", query=stripped, category=category.value)
            return await self._execute(self._seed_intent(category), seq, query=stripped)

        intent, fallback_reason = await self._interpret(stripped)
        return await self._execute(intent, seq, query=stripped, fallback_reason=fallback_reason)

    async def execute(self, intent: Intent) -> RouteResult:
        """Apply an already-known intent (quick buttons, structured commands)."""
        if isinstance(intent, NoOpIntent):
            return self._finish(RouteOutcome.IGNORED, intent=intent)

        seq = self._next_seq()
        logger.info("intent_dispatched", intent=intent_kind(intent), seq=seq)
        return await self._execute(intent, seq)

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _seed_intent(self, category: PlaceCategory) -> SeedCategoryIntent:
        return SeedCategoryIntent(
            category=category,
            radius_miles=category.default_radius_miles,
            center=self.center_hint(),
        )

    async def _interpret(self, stripped: str) -> Tuple[Intent, Optional[str]]:
        """Turn a stripped query into an intent via the remote interpreter.

        Returns the intent and, when the interpreter failed, the failure kind.
        """
        try:
            normalized = await self._call_interpreter(stripped)
        except InterpreterError as e:
            logger.warning(
                "voice_route_fallback",
                query=stripped,
                kind=e.kind,
                error=e.message,
                detail=(e.detail or "")[:200],
            )
            metrics.interpreter_failures.labels(kind=e.kind).inc()
            return LocalSearchIntent(term=stripped, center_hint=self.center_hint()), e.kind

        category = category_from_token(normalized)
        if category is not None:
            logger.info("voice_route_interpreted_category", query=stripped, category=category.value)
            return self._seed_intent(category), None

        normalized = normalize_transcript(normalized)
        split = split_location(normalized)
        if split.location is None or self.geocoder is None:
            return LocalSearchIntent(term=normalized, center_hint=self.center_hint()), None

        coordinate = await self._geocode(split.location)
        if coordinate is None:
            # drop the place name and search the whole phrase unbiased
            return LocalSearchIntent(term=normalized), None

        return LocalSearchIntent(term=split.term, center_hint=coordinate, recenter=True), None

    async def _call_interpreter(self, stripped: str) -> str:
        if self.interpreter is None:
            raise MissingCredentialError()

        if self.circuit_breaker is not None and not await self.circuit_breaker.can_execute():
            raise InterpreterUnavailableError("Interpreter circuit open")

        start = time.perf_counter()
        try:
            normalized = await self.interpreter.interpret(stripped)
        except InterpreterError:
            if self.circuit_breaker is not None:
                await self.circuit_breaker.record_failure()
            raise
        finally:
            metrics.interpreter_duration.observe(time.perf_counter() - start)

        if self.circuit_breaker is not None:
            await self.circuit_breaker.record_success()
        return normalized

    async def _geocode(self, place: str) -> Optional[Coordinate]:
        try:
            coordinate = await self.geocoder.geocode(place)
        except ProviderError as e:
            logger.warning("geocode_failed", place=place, error=e.message, detail=e.detail)
            return None

        if coordinate is None:
            logger.info("geocode_no_result", place=place)
        return coordinate

    async def _search(self, term: str, center: Optional[Coordinate]) -> List[SearchResult]:
        try:
            results = await self.search_provider.search(
                term,
                center=center,
                radius_miles=self.search_radius_miles,
                limit=self.search_limit,
            )
        except ProviderError as e:
            logger.warning("search_failed", term=term, error=e.message, detail=e.detail)
            metrics.search_requests.labels(status="error").inc()
            return []

        metrics.search_requests.labels(status="ok" if results else "empty").inc()
        logger.info("search_complete", term=term, count=len(results))
        return results

    # =========================================================================
    # Effects
    # =========================================================================

    async def _execute(
        self,
        intent: Intent,
        seq: int,
        query: Optional[str] = None,
        fallback_reason: Optional[str] = None,
    ) -> RouteResult:
        effect = await self._effect_for(intent)

        if seq != self._seq:
            logger.info("voice_route_stale", seq=seq, latest=self._seq, query=query)
            return self._finish(RouteOutcome.STALE, intent=intent, query=query,
                                fallback_reason=fallback_reason)

        draft = self._presentation.copy()
        effect(draft)
        self._presentation = draft

        logger.info(
            "presentation_updated",
            intent=intent_kind(intent),
            seq=seq,
            radius_miles=draft.radius_miles,
            results=len(draft.results),
        )
        return self._finish(RouteOutcome.APPLIED, intent=intent, query=query,
                            fallback_reason=fallback_reason)

    async def _effect_for(self, intent: Intent) -> Effect:
        """Run any awaited work for intent and return its state mutation.

        The mutation itself is synchronous and runs only at commit time.
        """
        if isinstance(intent, SeedCategoryIntent):
            def apply(state: PresentationState) -> None:
                state.category_filter = frozenset({intent.category})
                state.radius_miles = intent.radius_miles
                state.center_override = intent.center or state.center_override
                state.results = []
                state.navigation_url = None
                state.map_visible = True
            return apply

        if isinstance(intent, LocalSearchIntent):
            results = await self._search(intent.term, intent.center_hint)

            def apply(state: PresentationState) -> None:
                if intent.recenter and intent.center_hint is not None:
                    state.center_override = intent.center_hint
                self._show_results(state, results)
                state.navigation_url = None
            return apply

        if isinstance(intent, NavigateIntent):
            results = await self._search(intent.term, intent.center_hint or self.center_hint())
            url = None
            if results:
                first = results[0]
                url = build_navigation_url(self.nav_app, first.coordinate, first.name)
                logger.info("navigation_resolved", term=intent.term, destination=first.name)
            else:
                logger.info("navigation_unresolved", term=intent.term)

            def apply(state: PresentationState) -> None:
                self._show_results(state, results)
                state.navigation_url = url
            return apply

        if isinstance(intent, OpenMapOnlyIntent):
            def apply(state: PresentationState) -> None:
                state.map_visible = True
            return apply

        raise TypeError(f"Unsupported intent: {intent!r}")

    def _show_results(self, state: PresentationState, results: List[SearchResult]) -> None:
        state.results = list(results)
        if results:
            state.center_override = results[0].coordinate
            state.radius_miles = self.search_radius_miles
        state.map_visible = True

    def _finish(
        self,
        outcome: RouteOutcome,
        intent: Optional[Intent] = None,
        query: Optional[str] = None,
        fallback_reason: Optional[str] = None,
    ) -> RouteResult:
        metrics.route_attempts.labels(outcome=outcome.value).inc()
        if outcome in (RouteOutcome.IGNORED, RouteOutcome.SUPPRESSED):
            logger.debug("voice_route_dropped", outcome=outcome.value, query=query)
        return RouteResult(
            outcome=outcome,
            presentation=self.presentation,
            intent=intent,
            query=query,
            fallback_reason=fallback_reason,
        )
