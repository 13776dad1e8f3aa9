# nosec B101
"""
ConversionService wired to a real FrankfurterProvider over a mocked HTTP client.
"""

from datetime import date
from decimal import Decimal

import httpx
import pytest

from application.services import ConversionService, ProviderRegistry
from domain.exceptions.currency import (
    InvalidCurrencyError,
    NotFoundError,
    ProviderUnavailableError,
    ServiceUnavailableError,
)


@pytest.fixture
def service(provider):
    return ConversionService(ProviderRegistry([provider]))


@pytest.mark.asyncio
async def test_convert_usd_to_eur(service, mock_client, make_response, latest_payload):
    mock_client.get.return_value = make_response(latest_payload)

    result = await service.convert('USD', 'EUR', Decimal('100'), 'FrankfurterAPI')

    assert result.converted_amount == Decimal('85')
    assert mock_client.get.call_args[1]['params'] == {'from': 'USD', 'symbols': 'EUR'}


@pytest.mark.asyncio
@pytest.mark.parametrize('pair', [('TRY', 'USD'), ('USD', 'PLN'), ('THB', 'MXN')])
async def test_excluded_currency_makes_no_network_call(service, mock_client, pair):
    with pytest.raises(InvalidCurrencyError):
        await service.convert(*pair, Decimal('1'), 'FrankfurterAPI')

    mock_client.get.assert_not_called()


@pytest.mark.asyncio
async def test_repeated_conversion_uses_cached_rates(service, mock_client, make_response, latest_payload):
    mock_client.get.return_value = make_response(latest_payload)

    await service.convert('USD', 'EUR', Decimal('1'))
    await service.convert('USD', 'EUR', Decimal('2'))

    assert mock_client.get.call_count == 1


@pytest.mark.asyncio
async def test_open_circuit_surfaces_as_unavailable(service, mock_client):
    mock_client.get.side_effect = httpx.ConnectError('Connection refused')

    for _ in range(3):
        with pytest.raises(ServiceUnavailableError):
            await service.get_latest('USD', 'EUR')

    with pytest.raises(ProviderUnavailableError):
        await service.convert('USD', 'EUR', Decimal('1'))


@pytest.mark.asyncio
async def test_historical_pages_through_upstream_series(service, mock_client, make_response, historical_payload):
    mock_client.get.return_value = make_response(historical_payload)

    last_page = await service.get_historical(date(2024, 1, 2), date(2024, 1, 4), 'USD', 5, 2)

    assert last_page.page == 2
    assert last_page.total_records == 3
    assert list(last_page.rates) == [date(2024, 1, 4)]


@pytest.mark.asyncio
async def test_historical_empty_upstream_series_is_not_found(service, mock_client, make_response):
    mock_client.get.return_value = make_response({'amount': 1.0, 'base': 'USD', 'rates': {}})

    with pytest.raises(NotFoundError):
        await service.get_historical(date(2024, 1, 2), date(2024, 1, 4), 'USD', 1, 10)
