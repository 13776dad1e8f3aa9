import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from domain.exceptions.currency import ProviderUnavailableError, TransientProviderError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CircuitState(Enum):
    CLOSED = 'CLOSED'
    OPEN = 'OPEN'
    HALF_OPEN = 'HALF_OPEN'


@dataclass(frozen=True)
class _Ticket:
    generation: int
    probe: bool = False


class CircuitBreaker:
    """Circuit breaker owned by a single provider instance.

    One ``call`` is one logical request: whatever retrying happens inside
    ``func`` counts as a single success or failure. Only exceptions listed in
    ``failure_types`` count as failures; anything else raised by ``func``
    (client errors, cancellation) leaves the failure counter untouched.

    Every admitted call carries a ticket stamped with the trip generation.
    Results of calls admitted before the latest trip are ignored, and only the
    half-open probe ticket may close, re-open or release the probe slot.
    """

    def __init__(
        self,
        provider_name: str,
        failure_threshold: int = 3,
        recovery_timeout: float = 30.0,
        failure_types: tuple[type[BaseException], ...] = (TransientProviderError,),
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider_name = provider_name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_types = failure_types
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at: float | None = None
        self._probe_in_flight = False
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        if self._state == CircuitState.OPEN and self._cooldown_remaining() <= 0:
            return CircuitState.HALF_OPEN
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute function with circuit breaker protection"""
        ticket = await self._before_call()
        try:
            result = await func()
        except self.failure_types:
            await self._on_failure(ticket)
            raise
        except BaseException:
            await self._release_probe(ticket)
            raise
        await self._on_success(ticket)
        return result

    def _cooldown_remaining(self) -> float:
        if self._opened_at is None:
            return 0.0
        return self.recovery_timeout - (self._clock() - self._opened_at)

    def _is_stale(self, ticket: _Ticket) -> bool:
        # admitted before the most recent trip
        return ticket.generation != self._generation

    async def _before_call(self) -> _Ticket:
        async with self._lock:
            if self._state == CircuitState.OPEN:
                remaining = self._cooldown_remaining()
                if remaining > 0:
                    raise ProviderUnavailableError(self.provider_name, remaining)
                self._transition(CircuitState.HALF_OPEN, 'recovery timeout elapsed')

            if self._state == CircuitState.HALF_OPEN:
                if self._probe_in_flight:
                    raise ProviderUnavailableError(self.provider_name, self.recovery_timeout)
                self._probe_in_flight = True
                return _Ticket(self._generation, probe=True)

            return _Ticket(self._generation)

    async def _on_success(self, ticket: _Ticket) -> None:
        async with self._lock:
            if self._is_stale(ticket):
                return

            if ticket.probe:
                self._probe_in_flight = False
                self._failure_count = 0
                self._opened_at = None
                self._transition(CircuitState.CLOSED, 'probe succeeded')
            else:
                self._failure_count = 0

    async def _on_failure(self, ticket: _Ticket) -> None:
        async with self._lock:
            if self._is_stale(ticket):
                return

            if ticket.probe:
                self._probe_in_flight = False
                self._trip('probe failed')
                return

            self._failure_count += 1
            if self._failure_count >= self.failure_threshold:
                self._trip(f'{self._failure_count} consecutive failures')
            else:
                logger.warning(
                    f'API failure for {self.provider_name}: '
                    f'{self._failure_count}/{self.failure_threshold}'
                )

    async def _release_probe(self, ticket: _Ticket) -> None:
        async with self._lock:
            if ticket.probe and not self._is_stale(ticket):
                self._probe_in_flight = False

    def _trip(self, reason: str) -> None:
        self._generation += 1
        self._opened_at = self._clock()
        self._transition(CircuitState.OPEN, reason)

    def _transition(self, new_state: CircuitState, reason: str) -> None:
        old_state = self._state
        self._state = new_state
        log = logger.warning if new_state == CircuitState.OPEN else logger.info
        log(
            f'Circuit breaker {self.provider_name}: {old_state.value} -> {new_state.value} '
            f'({reason})'
        )

    def get_status(self) -> dict[str, Any]:
        state = self.state
        return {
            'provider_name': self.provider_name,
            'state': state.value,
            'status': 'healthy' if state == CircuitState.CLOSED else 'unhealthy',
            'failure_count': self._failure_count,
            'failure_threshold': self.failure_threshold,
        }
