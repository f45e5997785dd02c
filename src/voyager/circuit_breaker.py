"""
Interpreter circuit breaker.

Repeated language-model failures open the circuit; while open, voice
commands skip the network call and go straight to local search. Once the
recovery timeout has passed, at most `half_open_max_calls` trial calls are
let through. Enough trial successes close the circuit, any trial failure
opens it again.
"""
import asyncio
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

import structlog

logger = structlog.get_logger("voyager.circuit_breaker")


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Gate in front of RemoteInterpreter calls.

    Usage:
        breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=30)

        if not await breaker.can_execute():
            ...  # skip the interpreter, search directly
        try:
            text = await interpreter.interpret(query)
        except InterpreterError:
            await breaker.record_failure()
            raise
        await breaker.record_success()
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 30,
        half_open_max_calls: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            failure_threshold: Consecutive failures that open the circuit
            recovery_timeout: Seconds the circuit stays open before trials
            half_open_max_calls: Trial calls granted per half-open period,
                and the successes needed to close the circuit
            clock: Monotonic time source
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.half_open_max_calls = half_open_max_calls
        self._clock = clock

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None

        # trial bookkeeping, only meaningful while HALF_OPEN
        self.half_open_calls = 0
        self.half_open_successes = 0
        self.last_trial_time: Optional[float] = None

        self._lock = asyncio.Lock()

    def _transition(self, state: CircuitState) -> None:
        previous = self.state
        self.state = state
        self.half_open_calls = 0
        self.half_open_successes = 0
        self.last_trial_time = None
        if state == CircuitState.CLOSED:
            self.failure_count = 0

        log = logger.info if state != CircuitState.OPEN else logger.warning
        log("circuit_breaker_transition",
            previous=previous.value,
            state=state.value,
            failures=self.failure_count)

    def _grant_trial(self) -> bool:
        now = self._clock()
        if self.half_open_calls >= self.half_open_max_calls:
            # a granted trial never reported back; hand its slot out again
            if self.last_trial_time is None or now - self.last_trial_time < self.recovery_timeout:
                return False
            self.half_open_calls = self.half_open_successes

        self.half_open_calls += 1
        self.last_trial_time = now
        return True

    async def can_execute(self) -> bool:
        """
        Reserve permission for one interpreter call.

        Returns:
            True if the call may proceed. While half-open, each True is one
            of the limited trial slots.
        """
        async with self._lock:
            if self.state == CircuitState.CLOSED:
                return True

            if self.state == CircuitState.OPEN:
                elapsed = self._clock() - (self.last_failure_time or 0.0)
                if elapsed < self.recovery_timeout:
                    return False
                self._transition(CircuitState.HALF_OPEN)

            return self._grant_trial()

    async def record_success(self):
        async with self._lock:
            if self.state == CircuitState.HALF_OPEN:
                self.half_open_successes += 1
                if self.half_open_successes >= self.half_open_max_calls:
                    self._transition(CircuitState.CLOSED)
            elif self.state == CircuitState.CLOSED:
                self.failure_count = 0

    async def record_failure(self):
        async with self._lock:
            self.failure_count += 1
            self.last_failure_time = self._clock()

            if self.state == CircuitState.HALF_OPEN:
                self._transition(CircuitState.OPEN)
            elif self.state == CircuitState.CLOSED and self.failure_count >= self.failure_threshold:
                self._transition(CircuitState.OPEN)

    def get_status(self) -> Dict[str, Any]:
        """Snapshot for the health endpoint."""
        return {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "recovery_timeout": self.recovery_timeout,
            "half_open_calls": self.half_open_calls,
            "half_open_max_calls": self.half_open_max_calls,
        }
