from abc import ABC, abstractmethod
from typing import Sequence


class VisionInferenceService(ABC):
    """Abstract base class for vision-capable inference services."""

    @abstractmethod
    async def complete(
        self,
        instructions: str,
        visual_references: Sequence[str],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Run one completion over the instructions and visual references, returning raw text."""
        pass

    @abstractmethod
    async def close(self):
        """Close the provider and cleanup resources."""
        pass
