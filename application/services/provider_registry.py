import logging
from collections.abc import Iterable

from domain.exceptions.currency import NotFoundError
from infrastructure.providers.base import ExchangeRateProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
	"""Case-insensitive lookup of rate providers by name."""

	def __init__(self, providers: Iterable[ExchangeRateProvider]):
		self._providers: dict[str, ExchangeRateProvider] = {}
		for provider in providers:
			key = provider.name.casefold()
			if key in self._providers:
				raise ValueError(f'Duplicate provider name: {provider.name}')
			self._providers[key] = provider

	@property
	def names(self) -> list[str]:
		return [provider.name for provider in self._providers.values()]

	def get(self, name: str) -> ExchangeRateProvider:
		provider = self._providers.get(name.casefold())
		if provider is None:
			raise NotFoundError(f'No provider found for {name}')

		logger.debug(f'Using {provider.name} for exchange rates.')
		return provider

	def __iter__(self):
		return iter(self._providers.values())
