import logging
from datetime import timedelta

import httpx
from redis.asyncio import Redis

from application.services import ConversionService, ProviderRegistry
from config.logging import setup_logging
from config.settings import Settings, get_settings
from infrastructure.cache.base import CacheService
from infrastructure.cache.memory_cache import MemoryCacheService
from infrastructure.cache.redis_cache import RedisCacheService
from infrastructure.providers import CircuitBreaker, FrankfurterProvider

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	settings: Settings | None = None
	cache: CacheService | None = None
	http_client: httpx.AsyncClient | None = None
	registry: ProviderRegistry | None = None
	conversion_service: ConversionService | None = None


deps = AppDependencies()


def build_cache(settings: Settings) -> CacheService:
	if settings.CACHE_BACKEND == 'redis':
		return RedisCacheService(Redis.from_url(settings.REDIS_URL, decode_responses=True))
	return MemoryCacheService()


def init_dependencies(settings: Settings | None = None) -> AppDependencies:
	"""Initialize all singleton dependencies. Called at app startup."""
	settings = settings or get_settings()
	setup_logging('DEBUG' if settings.DEBUG else settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
	logger.info(f'Initializing dependencies for {settings.APP_NAME}...')

	deps.settings = settings
	deps.cache = build_cache(settings)
	deps.http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.HTTP_TIMEOUT))

	frankfurter = FrankfurterProvider(
		cache=deps.cache,
		base_url=settings.FRANKFURTER_BASE_URL,
		client=deps.http_client,
		cache_ttl=timedelta(seconds=settings.RATE_CACHE_TTL_SECONDS),
		cache_key_prefix=settings.CACHE_KEY_PREFIX,
		retry_attempts=settings.RETRY_ATTEMPTS,
		backoff_base=settings.RETRY_BACKOFF_BASE,
		circuit_breaker=CircuitBreaker(
			'FrankfurterAPI',
			failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
			recovery_timeout=settings.CIRCUIT_RECOVERY_TIMEOUT_SECONDS,
		),
	)
	deps.registry = ProviderRegistry([frankfurter])
	deps.conversion_service = ConversionService(
		registry=deps.registry,
		excluded_currencies=settings.EXCLUDED_CURRENCIES,
		default_provider=settings.DEFAULT_PROVIDER,
	)

	logger.info(f'Dependencies initialized with providers: {", ".join(deps.registry.names)}')
	return deps


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.http_client:
		await deps.http_client.aclose()
	if isinstance(deps.cache, RedisCacheService):
		await deps.cache.close()

	deps.cache = None
	deps.http_client = None
	deps.registry = None
	deps.conversion_service = None
	logger.info('Cleanup complete')


def get_registry() -> ProviderRegistry:
	if deps.registry is None:
		raise RuntimeError('Providers not initialized')
	return deps.registry


def get_conversion_service() -> ConversionService:
	if deps.conversion_service is None:
		raise RuntimeError('Conversion service not initialized')
	return deps.conversion_service
