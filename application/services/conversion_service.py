import logging
import math
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from application.services.provider_registry import ProviderRegistry
from domain.exceptions.currency import (
	InvalidArgumentError,
	InvalidCurrencyError,
	NotFoundError,
	ProviderUnavailableError,
	ServiceUnavailableError,
)
from domain.models.currency import ConversionResult, PagedHistoricalResult, RateSnapshot

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = 'FrankfurterAPI'
DEFAULT_EXCLUDED_CURRENCIES = frozenset({'TRY', 'PLN', 'THB', 'MXN'})

# Expected outcomes the caller can act on; everything else is masked.
_PASSTHROUGH_ERRORS = (
	NotFoundError,
	InvalidArgumentError,
	ProviderUnavailableError,
	ServiceUnavailableError,
)


@contextmanager
def _masking_unexpected_errors(public_message: str, context: str) -> Iterator[None]:
	try:
		yield
	except _PASSTHROUGH_ERRORS as e:
		logger.warning(f'{context}: {e}')
		raise
	except Exception as e:
		logger.exception(f'Unexpected error {context}')
		raise ServiceUnavailableError(public_message) from e


class ConversionService:
	def __init__(
		self,
		registry: ProviderRegistry,
		excluded_currencies: Iterable[str] = DEFAULT_EXCLUDED_CURRENCIES,
		default_provider: str = DEFAULT_PROVIDER,
	):
		self.registry = registry
		self.default_provider = default_provider
		self.excluded_currencies = frozenset(code.upper() for code in excluded_currencies)

	async def get_latest(
		self, base: str, target: str | None = None, provider_name: str | None = None
	) -> RateSnapshot:
		base = base.upper()
		target = target.upper() if target else None
		provider_name = provider_name or self.default_provider
		logger.info(f'Fetching exchange rates for {base} from {provider_name}')

		with _masking_unexpected_errors(
			'An error occurred while fetching exchange rates. Please try again later.',
			f'fetching exchange rates for {base}',
		):
			provider = self.registry.get(provider_name)
			snapshot = await provider.get_latest(base, target)

			if snapshot is None or not snapshot.rates:
				raise NotFoundError(f'No exchange rates found for {base}.')

			return snapshot

	async def convert(
		self,
		from_currency: str,
		to_currency: str,
		amount: Decimal,
		provider_name: str | None = None,
	) -> ConversionResult:
		from_currency = from_currency.upper()
		to_currency = to_currency.upper()

		if from_currency in self.excluded_currencies or to_currency in self.excluded_currencies:
			logger.warning(f'Conversion involving {from_currency} or {to_currency} is not allowed.')
			raise InvalidCurrencyError(
				f'Conversion involving {from_currency} or {to_currency} is not allowed.'
			)

		provider_name = provider_name or self.default_provider
		logger.info(f'Fetching exchange rate for {from_currency} to {to_currency} using {provider_name}')

		with _masking_unexpected_errors(
			'An error occurred while converting currency. Please try again later.',
			f'converting currency from {from_currency} to {to_currency}',
		):
			latest = await self.get_latest(from_currency, to_currency, provider_name)

			rate = latest.rates.get(to_currency)
			if rate is None:
				raise NotFoundError(
					f"Exchange rate not found for conversion from '{from_currency}' to '{to_currency}'."
				)

			return ConversionResult(
				from_currency=from_currency,
				to_currency=to_currency,
				amount=amount,
				converted_amount=amount * rate,
			)

	async def get_historical(
		self,
		start_date: date,
		end_date: date,
		base: str,
		page: int = 1,
		page_size: int = 10,
		provider_name: str | None = None,
	) -> PagedHistoricalResult:
		base = base.upper()
		provider_name = provider_name or self.default_provider
		if page_size < 1:
			raise InvalidArgumentError('Page size must be greater than 0.')
		if start_date > end_date:
			raise InvalidArgumentError('Start date must be before or equal to the end date.')

		logger.info(f'Fetching historical exchange rates for {base} from {start_date} to {end_date}')

		with _masking_unexpected_errors(
			'An error occurred while fetching historical exchange rates. Please try again later.',
			f'fetching historical exchange rates for {base}',
		):
			provider = self.registry.get(provider_name)
			series = await provider.get_historical(start_date, end_date, base)

			if series is None or not series.rates:
				raise NotFoundError('No historical exchange rates found.')

			entries = list(series.rates.items())
			total_records = len(entries)
			total_pages = math.ceil(total_records / page_size)

			# out-of-range pages are clamped, not rejected
			page = min(max(page, 1), total_pages)
			offset = (page - 1) * page_size

			return PagedHistoricalResult(
				amount=series.amount,
				base_currency=series.base_currency,
				start_date=series.start_date,
				end_date=series.end_date,
				rates=dict(entries[offset:offset + page_size]),
				page=page,
				page_size=page_size,
				total_records=total_records,
			)
