from typing import Any, Dict, Sequence

from loguru import logger
from openai import AsyncOpenAI

from ballknowledge.exceptions import ConfigurationException
from ballknowledge.providers.base import VisionInferenceService
from ballknowledge.providers.messages import build_messages, response_text
from ballknowledge.utils.error_handler import ErrorHandler


class OpenAIVisionProvider(VisionInferenceService):
    """OpenAI Vision provider implementation."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.client = self._initialize_client()

    def _initialize_client(self):
        """Initialize OpenAI client."""
        api_key = self.config.get("api_key")
        if not api_key:
            raise ConfigurationException("OpenAI API key is required")

        timeout = self.config.get("timeout", 120)

        # Exactly one attempt per call; retry policy belongs to the caller.
        return AsyncOpenAI(
            api_key=api_key,
            timeout=timeout,
            max_retries=0
        )

    async def complete(
        self,
        instructions: str,
        visual_references: Sequence[str],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Run a chat completion over the text instructions and image references."""
        model = self.config.get("model_name", "gpt-4o")
        messages = build_messages(instructions, visual_references)
        logger.debug(f"OpenAI vision request: model={model}, images={len(visual_references)}")

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_completion_tokens=max_output_tokens,
            )
        except Exception as e:
            raise ErrorHandler.handle_provider_error(e, "openai") from e

        return response_text(response)

    async def close(self):
        """Close the client and cleanup resources."""
        if self.client:
            logger.info("Closing OpenAI vision client")
            await self.client.close()
