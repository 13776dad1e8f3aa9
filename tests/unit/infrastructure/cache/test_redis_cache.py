# nosec B101


import json
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from infrastructure.cache.redis_cache import RedisCacheService


@pytest.mark.asyncio
async def test_get_cache_hit_returns_decoded_value():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = json.dumps({'base': 'USD', 'rates': {'EUR': '0.85'}})

    cache_service = RedisCacheService(redis_client=mock_redis)
    value, found = await cache_service.get('ExchangeRates:USD:EUR')

    assert found is True
    assert value == {'base': 'USD', 'rates': {'EUR': '0.85'}}
    mock_redis.get.assert_called_once_with('ExchangeRates:USD:EUR')


@pytest.mark.asyncio
async def test_get_cache_miss_returns_not_found():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = None

    cache_service = RedisCacheService(redis_client=mock_redis)
    value, found = await cache_service.get('ExchangeRates:USD:EUR')

    assert found is False
    assert value is None


@pytest.mark.asyncio
async def test_get_malformed_json_is_treated_as_miss(caplog):
    mock_redis = AsyncMock()
    mock_redis.get.return_value = '{ invalid json }'

    cache_service = RedisCacheService(redis_client=mock_redis)
    value, found = await cache_service.get('ExchangeRates:USD:EUR')

    assert found is False
    assert value is None
    assert 'Invalid json data' in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize('error', [RedisConnectionError('refused'), RedisTimeoutError('slow')])
async def test_get_redis_failure_is_treated_as_miss(error):
    mock_redis = AsyncMock()
    mock_redis.get.side_effect = error

    cache_service = RedisCacheService(redis_client=mock_redis)
    value, found = await cache_service.get('ExchangeRates:USD:ALL')

    assert (value, found) == (None, False)


@pytest.mark.asyncio
async def test_set_serializes_and_stores_with_ttl():
    mock_redis = AsyncMock()
    cache_service = RedisCacheService(redis_client=mock_redis)

    await cache_service.set('ExchangeRates:USD:EUR', {'rates': {'EUR': '0.85'}}, timedelta(minutes=10))

    mock_redis.setex.assert_called_once()
    key, ttl, stored = mock_redis.setex.call_args[0]
    assert key == 'ExchangeRates:USD:EUR'
    assert ttl == timedelta(minutes=10)
    assert json.loads(stored) == {'rates': {'EUR': '0.85'}}


@pytest.mark.asyncio
async def test_set_redis_failure_is_not_escalated(caplog):
    mock_redis = AsyncMock()
    mock_redis.setex.side_effect = RedisConnectionError('refused')

    cache_service = RedisCacheService(redis_client=mock_redis)
    await cache_service.set('ExchangeRates:USD:EUR', {'rates': {}}, timedelta(minutes=10))

    assert 'Cache write failed' in caplog.text


@pytest.mark.asyncio
async def test_set_then_get_returns_same_value():
    mock_redis = AsyncMock()
    cache_service = RedisCacheService(redis_client=mock_redis)
    original = {'amount': '1', 'base': 'GBP', 'date': '2024-05-10', 'rates': {'USD': '1.25'}}

    await cache_service.set('ExchangeRates:GBP:USD', original, timedelta(minutes=10))
    mock_redis.get.return_value = mock_redis.setex.call_args[0][2]

    value, found = await cache_service.get('ExchangeRates:GBP:USD')

    assert found is True
    assert value == original
