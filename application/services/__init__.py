from .conversion_service import ConversionService
from .provider_registry import ProviderRegistry

__all__ = ['ConversionService', 'ProviderRegistry']
