class CurrencyException(Exception):
    pass


class NotFoundError(CurrencyException):
    pass


class InvalidArgumentError(CurrencyException):
    pass


class InvalidCurrencyError(InvalidArgumentError):
    pass


class ProviderError(CurrencyException):
    pass


class TransientProviderError(ProviderError):
    """Timeout, connection failure or 5xx/408 response; safe to retry."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class InvalidResponseError(ProviderError):
    pass


class ProviderUnavailableError(CurrencyException):
    """Raised when a provider's circuit breaker is open and blocking calls"""

    def __init__(self, provider_name: str, retry_after: float):
        self.provider_name = provider_name
        self.retry_after = retry_after
        super().__init__(
            f'Circuit breaker OPEN for {provider_name}, retry in {retry_after:.0f}s'
        )


class ServiceUnavailableError(CurrencyException):
    pass


class CacheError(CurrencyException):
    pass
