from typing import Any, Dict, Sequence

from azure.identity.aio import get_bearer_token_provider
from loguru import logger
from openai import AsyncAzureOpenAI

from ballknowledge.exceptions import ConfigurationException
from ballknowledge.providers.base import VisionInferenceService
from ballknowledge.providers.credentials import AzureCredentials, COGNITIVE_SERVICES_SCOPE
from ballknowledge.providers.messages import build_messages, response_text
from ballknowledge.utils.error_handler import ErrorHandler


class AzureVisionProvider(VisionInferenceService):
    """Azure OpenAI vision provider implementation."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.credential = None
        self.client = self._initialize_client()

    def _initialize_client(self):
        """Initialize Azure OpenAI client."""
        endpoint = self.config.get("endpoint")
        api_version = self.config.get("api_version", "2024-08-01-preview")
        use_managed_identity = self.config.get("use_managed_identity", False)
        timeout = self.config.get("timeout", 120)

        if not endpoint:
            raise ConfigurationException("Azure OpenAI endpoint is required")
        if not self.config.get("deployment_name"):
            raise ConfigurationException("Azure OpenAI deployment name is required")

        if use_managed_identity:
            self.credential = AzureCredentials.get_async_credentials()
            token_provider = get_bearer_token_provider(self.credential, COGNITIVE_SERVICES_SCOPE)
            return AsyncAzureOpenAI(
                api_version=api_version,
                azure_endpoint=endpoint,
                azure_ad_token_provider=token_provider,
                max_retries=0,
                timeout=timeout
            )

        api_key = self.config.get("api_key")
        if not api_key:
            raise ConfigurationException("Azure OpenAI API key is required when managed identity is disabled")

        return AsyncAzureOpenAI(
            api_version=api_version,
            azure_endpoint=endpoint,
            api_key=api_key,
            max_retries=0,
            timeout=timeout
        )

    async def complete(
        self,
        instructions: str,
        visual_references: Sequence[str],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Run a chat completion against the configured deployment."""
        deployment_name = self.config["deployment_name"]
        messages = build_messages(instructions, visual_references)
        logger.debug(f"Azure vision request: deployment={deployment_name}, images={len(visual_references)}")

        try:
            response = await self.client.chat.completions.create(
                model=deployment_name,
                messages=messages,
                temperature=temperature,
                max_completion_tokens=max_output_tokens,
            )
        except Exception as e:
            raise ErrorHandler.handle_provider_error(e, "azure") from e

        return response_text(response)

    async def close(self):
        """Close the client and credential."""
        if self.client:
            logger.info("Closing Azure OpenAI vision client")
            await self.client.close()
        if self.credential is not None:
            await self.credential.close()
