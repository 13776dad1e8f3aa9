"""
Shared fixtures for unit tests: fake clock, HTTP response stubs and a
Frankfurter provider wired to an in-memory cache with no real sleeping.
"""

import copy
from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from infrastructure.cache.memory_cache import MemoryCacheService
from infrastructure.providers.circuit_breaker import CircuitBreaker
from infrastructure.providers.frankfurter import FrankfurterProvider

LATEST_USD_EUR = {
    'amount': 1.0,
    'base': 'USD',
    'date': '2024-05-10',
    'rates': {'EUR': 0.85},
}

HISTORICAL_USD = {
    'amount': 1.0,
    'base': 'USD',
    'start_date': '2024-01-02',
    'end_date': '2024-01-04',
    'rates': {
        '2024-01-02': {'EUR': 0.91, 'GBP': 0.79},
        '2024-01-03': {'EUR': 0.92, 'GBP': 0.80},
        '2024-01-04': {'EUR': 0.93, 'GBP': 0.81},
    },
}


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_response():
    def _make(payload=None, status_code=200, text=None, json_error=None):
        response = Mock()
        response.status_code = status_code
        response.text = text if text is not None else str(payload)
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = payload
        return response

    return _make


@pytest.fixture
def mock_client():
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def memory_cache(clock):
    return MemoryCacheService(clock=clock)


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker('FrankfurterAPI', failure_threshold=3, recovery_timeout=30, clock=clock)


@pytest.fixture
def provider(mock_client, memory_cache, breaker, sleep):
    return FrankfurterProvider(
        cache=memory_cache,
        base_url='https://frankfurter.test/',
        client=mock_client,
        cache_ttl=timedelta(minutes=10),
        circuit_breaker=breaker,
        sleep=sleep,
    )


@pytest.fixture
def latest_payload():
    return copy.deepcopy(LATEST_USD_EUR)


@pytest.fixture
def historical_payload():
    return copy.deepcopy(HISTORICAL_USD)
