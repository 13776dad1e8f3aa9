import logging
from typing import Any

from domain.exceptions.currency import (
	InvalidArgumentError,
	NotFoundError,
	ProviderUnavailableError,
	ServiceUnavailableError,
)

logger = logging.getLogger(__name__)


def error_response(exc: Exception) -> tuple[int, dict[str, Any]]:
	"""Map a core error onto the status code and body the transport layer should send."""
	if isinstance(exc, NotFoundError):
		return 404, {'detail': str(exc)}

	if isinstance(exc, InvalidArgumentError):
		return 400, {'detail': str(exc)}

	if isinstance(exc, ProviderUnavailableError):
		return 503, {
			'detail': 'Exchange rate provider temporarily unavailable',
			'retry_after': round(exc.retry_after),
		}

	if isinstance(exc, ServiceUnavailableError):
		logger.error(f'Service error: {exc}')
		return 503, {'detail': str(exc)}

	logger.error(f'Unhandled exception: {exc}', exc_info=exc)
	return 500, {'detail': 'Internal server error'}
