from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from ballknowledge.analysis_pipeline.core.extraction import ResilientRecordExtractor
from ballknowledge.analysis_pipeline.models import FrameSample
from ballknowledge.exceptions import UpstreamError
from ballknowledge.providers.base import VisionInferenceService
from ballknowledge.utils.error_handler import convert_exceptions

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_OUTPUT_TOKENS = 4000
MAX_VISUAL_REFERENCES = 10


class VisionRequester:
    """
    Shared request flow: instructions plus up to ``max_visual_references`` frame
    references go to the service in a single call, and the raw reply is run
    through the resilient extractor.
    """

    def __init__(
        self,
        service: Optional[VisionInferenceService],
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        max_visual_references: int = MAX_VISUAL_REFERENCES,
        extractor: Optional[ResilientRecordExtractor] = None,
    ):
        self.service = service
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.max_visual_references = max_visual_references
        self.extractor = extractor or ResilientRecordExtractor()

    @property
    def is_configured(self) -> bool:
        return self.service is not None

    def visual_references(self, frames: Sequence[FrameSample]) -> List[str]:
        # Samples past the cap are dropped silently
        return [frame.reference for frame in list(frames)[:self.max_visual_references]]

    @convert_exceptions({Exception: UpstreamError})
    async def _complete(self, instructions: str, references: List[str]) -> str:
        return await self.service.complete(
            instructions,
            references,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

    async def _request_mapping(self, instructions: str, frames: Sequence[FrameSample]) -> Dict[str, Any]:
        references = self.visual_references(frames)
        logger.info(f"{type(self).__name__}: sending {len(references)} visual references")
        raw_text = await self._complete(instructions, references)
        return self.extractor.extract(raw_text)
