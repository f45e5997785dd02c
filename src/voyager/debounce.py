"""
Duplicate suppression for voice commands.

Speech recognition republishes the transcript on every partial result, so
the same command can arrive several times within a second. The guard
accepts a stripped query once and rejects identical repeats inside the
debounce window.

The accept decision and the state update happen in one synchronous call,
before the caller awaits anything, so overlapping routing attempts on the
same event loop can never both dispatch the same utterance.
"""

import math
import time
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional

import structlog

logger = structlog.get_logger("voyager.debounce")

DEFAULT_WINDOW_SECONDS = 1.5
DEFAULT_MIN_LENGTH = 3

# Fragments that show up mid-utterance and are never commands on their own
THROWAWAY_QUERIES: FrozenSet[str] = frozenset({"near", "near me", "me", "please"})


@dataclass
class DebounceState:
    """Last accepted query and when it was accepted (monotonic seconds)."""
    last_query: str = ""
    last_sent_at: float = -math.inf


class DebounceGuard:
    """
    Accept/reject gate in front of routing dispatch.

    Usage:
        guard = DebounceGuard(window_seconds=1.5)

        if guard.accept("starbucks"):
            ...  # dispatch
    """

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        min_length: int = DEFAULT_MIN_LENGTH,
        throwaways: FrozenSet[str] = THROWAWAY_QUERIES,
        clock: Callable[[], float] = time.monotonic,
        state: Optional[DebounceState] = None,
    ):
        self.window_seconds = window_seconds
        self.min_length = min_length
        self.throwaways = throwaways
        self._clock = clock
        self.state = state or DebounceState()

    def is_trivial(self, query: str) -> bool:
        """Empty, throwaway, or shorter than the minimum length."""
        return (
            not query
            or query in self.throwaways
            or len(query) < self.min_length
        )

    def accept(self, query: str, now: Optional[float] = None) -> bool:
        """
        Decide whether to dispatch query, recording it when accepted.

        Args:
            query: Stripped command text
            now: Current monotonic time; read from the clock when omitted

        Returns:
            True if the query should be dispatched
        """
        if self.is_trivial(query):
            logger.debug("voice_query_trivial", query=query)
            return False

        now = self._clock() if now is None else now
        elapsed = now - self.state.last_sent_at
        if query == self.state.last_query and elapsed < self.window_seconds:
            logger.debug("voice_query_debounced", query=query, elapsed=round(elapsed, 3))
            return False

        self.state.last_query = query
        self.state.last_sent_at = now
        return True
