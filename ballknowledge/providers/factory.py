from typing import Dict, Optional, Type

from loguru import logger

from .base import VisionInferenceService
from .azure_providers import AzureVisionProvider
from .openai_providers import OpenAIVisionProvider
from ..config.settings import InferenceConfig
from ..exceptions import ConfigurationException


class ProviderFactory:
    """Factory class for creating vision inference service instances."""

    _vision_providers: Dict[str, Type[VisionInferenceService]] = {
        'openai': OpenAIVisionProvider,
        'azure': AzureVisionProvider,
    }

    @classmethod
    def create_vision_service(
        cls, config: Optional[InferenceConfig] = None
    ) -> Optional[VisionInferenceService]:
        """
        Create the vision inference service described by the configuration.

        Args:
            config: Inference configuration (optional, defaults to environment)

        Returns:
            VisionInferenceService instance, or None when the provider lacks the
            credentials or endpoint it needs. None is the "service absent" handle
            the analysis pipeline expects.

        Raises:
            ConfigurationException: If the provider name is not supported
        """
        if config is None:
            config = InferenceConfig()
        provider_name = config.provider.lower()

        if provider_name not in cls._vision_providers:
            raise ConfigurationException(
                f"Unknown vision provider: {provider_name}. "
                f"Supported providers: {list(cls._vision_providers.keys())}"
            )

        provider_class = cls._vision_providers[provider_name]
        try:
            provider_instance = provider_class(config.model_dump())
        except ConfigurationException as e:
            logger.warning(f"Vision provider '{provider_name}' not configured: {e}")
            return None

        logger.info(f"Created vision provider: {provider_name}")
        return provider_instance

    @classmethod
    def get_supported_providers(cls) -> list:
        """Get list of supported vision providers."""
        return list(cls._vision_providers.keys())

    @classmethod
    def register_vision_provider(cls, name: str, provider_class: Type[VisionInferenceService]):
        """Register a new vision provider."""
        cls._vision_providers[name.lower()] = provider_class
        logger.info(f"Registered vision provider: {name}")


# Global factory instance
provider_factory = ProviderFactory()
