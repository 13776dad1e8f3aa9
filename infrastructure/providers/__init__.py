from .base import ExchangeRateProvider
from .circuit_breaker import CircuitBreaker, CircuitState
from .frankfurter import FrankfurterProvider

__all__ = ['ExchangeRateProvider', 'CircuitBreaker', 'CircuitState', 'FrankfurterProvider']
