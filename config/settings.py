from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'Currency Converter'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	# Upstream provider
	FRANKFURTER_BASE_URL: str = 'https://api.frankfurter.app'
	HTTP_TIMEOUT: float = 10.0
	DEFAULT_PROVIDER: str = 'FrankfurterAPI'

	# Cache
	CACHE_BACKEND: Literal['memory', 'redis'] = 'memory'
	REDIS_URL: str = 'redis://localhost:6379'
	CACHE_KEY_PREFIX: str = 'ExchangeRates'
	RATE_CACHE_TTL_SECONDS: int = 600

	# Resilience
	RETRY_ATTEMPTS: int = 5
	RETRY_BACKOFF_BASE: float = 2.0
	CIRCUIT_FAILURE_THRESHOLD: int = 3
	CIRCUIT_RECOVERY_TIMEOUT_SECONDS: float = 30.0

	# Business rules
	EXCLUDED_CURRENCIES: frozenset[str] = frozenset({'TRY', 'PLN', 'THB', 'MXN'})

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
