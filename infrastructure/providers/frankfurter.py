import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
	AsyncRetrying,
	RetryCallState,
	retry_if_exception_type,
	stop_after_attempt,
	wait_exponential,
)

from domain.exceptions.currency import (
	InvalidResponseError,
	NotFoundError,
	ProviderError,
	TransientProviderError,
)
from domain.models.currency import HistoricalSeries, RateSnapshot
from infrastructure.cache.base import CacheService
from infrastructure.providers.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)


class LatestRatesPayload(BaseModel):
	amount: Decimal = Decimal('1')
	base: str | None = None
	date: str = ''
	rates: dict[str, Decimal]


class HistoricalRatesPayload(BaseModel):
	amount: Decimal = Decimal('1')
	base: str | None = None
	start_date: date | None = None
	end_date: date | None = None
	rates: dict[date, dict[str, Decimal]]


class FrankfurterProvider:
	BASE_URL = 'https://api.frankfurter.app'

	def __init__(
		self,
		cache: CacheService,
		base_url: str = BASE_URL,
		client: httpx.AsyncClient | None = None,
		timeout: float = 10,
		cache_ttl: timedelta = timedelta(minutes=10),
		cache_key_prefix: str = 'ExchangeRates',
		retry_attempts: int = 5,
		backoff_base: float = 2,
		circuit_breaker: CircuitBreaker | None = None,
		sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
	):
		self.base_url = base_url.rstrip('/')
		self.cache = cache
		self.cache_ttl = cache_ttl
		self.cache_key_prefix = cache_key_prefix
		self.retry_attempts = retry_attempts
		self.backoff_base = backoff_base
		self.circuit_breaker = circuit_breaker or CircuitBreaker(self.name)
		self._sleep = sleep
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'FrankfurterAPI'

	def _make_rate_key(self, base: str, target: str | None) -> str:
		return f'{self.cache_key_prefix}:{base}:{target or "ALL"}'

	async def get_latest(self, base: str, target: str | None = None) -> RateSnapshot:
		base = base.upper()
		target = target.upper() if target else None
		key = self._make_rate_key(base, target)
		cached, found = await self.cache.get(key)
		if found:
			try:
				snapshot = RateSnapshot.from_dict(cached)
			except (KeyError, TypeError, AttributeError, InvalidOperation) as e:
				logger.warning(f'Ignoring malformed cache entry {key}: {e!r}')
			else:
				logger.info(f'Returning cached exchange rates for {base} {target or "ALL"}')
				return snapshot

		params = {'from': base}
		if target is not None:
			params['symbols'] = target

		logger.info(f'Fetching exchange rates from {self.name} for {base} {target or "ALL"}')
		data = await self._request('latest', params)

		try:
			payload = LatestRatesPayload.model_validate(data)
		except ValidationError as e:
			raise InvalidResponseError(
				f'{self.name} returned an unexpected latest-rates payload'
			) from e

		rates = {
			code.upper(): rate
			for code, rate in payload.rates.items()
			if code.upper() != base
		}
		if not rates:
			raise NotFoundError(f'No exchange rates found for {base}.')

		snapshot = RateSnapshot(
			amount=payload.amount,
			base_currency=(payload.base or base).upper(),
			as_of=payload.date,
			rates=rates,
		)
		await self.cache.set(key, snapshot.to_dict(), self.cache_ttl)
		logger.debug(f'Cached {key} for {self.cache_ttl.total_seconds():.0f}s')
		return snapshot

	async def get_historical(self, start: date, end: date, base: str) -> HistoricalSeries:
		base = base.upper()
		endpoint = f'{start:%Y-%m-%d}..{end:%Y-%m-%d}'
		logger.info(f'Fetching historical exchange rates from {start} to {end} for {base}')
		data = await self._request(endpoint, {'from': base})

		try:
			payload = HistoricalRatesPayload.model_validate(data)
		except ValidationError as e:
			logger.error(f'Invalid historical payload from {self.name} for {endpoint}: {e}')
			raise InvalidResponseError(
				f'The response from {self.name} was not in the expected format.'
			) from e

		start_date = payload.start_date or start
		end_date = payload.end_date or end
		rates = {
			day: payload.rates[day]
			for day in sorted(payload.rates)
			if start_date <= day <= end_date
		}
		if not rates:
			raise NotFoundError(f'No historical exchange rates found for {base}.')

		return HistoricalSeries(
			amount=payload.amount,
			base_currency=(payload.base or base).upper(),
			start_date=start_date,
			end_date=end_date,
			rates=rates,
		)

	async def _request(self, endpoint: str, params: dict[str, str]) -> Any:
		url = f'{self.base_url}/{endpoint}'
		start_time = time.perf_counter()

		response = await self.circuit_breaker.call(
			lambda: self._retrying()(self._send, url, params)
		)
		elapsed_ms = (time.perf_counter() - start_time) * 1000

		if not 200 <= response.status_code < 300:
			logger.error(f'{self.name} HTTP error {response.status_code} for {url}')
			raise ProviderError(
				f'{self.name} HTTP error {response.status_code}: {response.text[:200]}'
			)

		logger.info(f'{self.name}/{endpoint} fetched in {elapsed_ms:.0f}ms')
		try:
			return response.json()
		except ValueError as e:
			raise InvalidResponseError(f'{self.name} returned a non-JSON body') from e

	def _retrying(self) -> AsyncRetrying:
		return AsyncRetrying(
			sleep=self._sleep,
			stop=stop_after_attempt(self.retry_attempts),
			wait=wait_exponential(multiplier=self.backoff_base, exp_base=self.backoff_base),
			retry=retry_if_exception_type(TransientProviderError),
			before_sleep=self._log_retry,
			reraise=True,
		)

	def _log_retry(self, retry_state: RetryCallState) -> None:
		reason = retry_state.outcome.exception() if retry_state.outcome else None
		delay = retry_state.next_action.sleep if retry_state.next_action else 0
		logger.warning(
			f'Retry {retry_state.attempt_number} for {self.name} due to {reason}; '
			f'waiting {delay:.0f}s'
		)

	async def _send(self, url: str, params: dict[str, str]) -> httpx.Response:
		"""Single upstream attempt; raises TransientProviderError for retryable outcomes."""
		try:
			response = await self._client.get(url, params=params)
		except httpx.TransportError as e:
			raise TransientProviderError(
				f'{self.name} request failed: {e.__class__.__name__}'
			) from e
		except httpx.RequestError as e:
			raise ProviderError(f'{self.name} request failed: {e.__class__.__name__}') from e

		if response.status_code == 408 or response.status_code >= 500:
			raise TransientProviderError(
				f'{self.name} HTTP error {response.status_code}',
				status_code=response.status_code,
			)
		return response

	async def close(self) -> None:
		await self._client.aclose()
