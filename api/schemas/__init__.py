from .requests import ConversionRequest, HistoricalRatesRequest, LatestRatesRequest
from .responses import ConversionResponse, ExchangeRateResponse, HistoricalExchangeRateResponse

__all__ = [
	'ConversionRequest',
	'ConversionResponse',
	'ExchangeRateResponse',
	'HistoricalExchangeRateResponse',
	'HistoricalRatesRequest',
	'LatestRatesRequest',
]
