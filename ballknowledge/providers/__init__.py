"""Provider system for Ball Knowledge."""

from .base import VisionInferenceService
from .factory import ProviderFactory, provider_factory
from .azure_providers import AzureVisionProvider
from .openai_providers import OpenAIVisionProvider

__all__ = [
    # Base classes
    'VisionInferenceService',
    # Factory
    'ProviderFactory',
    'provider_factory',
    # Providers
    'AzureVisionProvider',
    'OpenAIVisionProvider',
]
