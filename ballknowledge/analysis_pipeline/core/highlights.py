from typing import List, Sequence, Union

from loguru import logger

from ballknowledge.analysis_pipeline.core.requester import VisionRequester
from ballknowledge.analysis_pipeline.models import (
    ClipReference,
    EvaluationMode,
    FrameSample,
    Highlight,
    SubjectContext,
)
from ballknowledge.analysis_pipeline.prompts_and_description import HIGHLIGHTS_PROMPT

MAX_HIGHLIGHTS = 5


class HighlightRequester(VisionRequester):
    """
    Requests 3-5 notable moments. Highlights are optional enrichment: without a
    configured service this returns an empty list, and unparseable output also
    yields an empty list. A failing service call still raises UpstreamError.
    """

    def __init__(self, *args, max_highlights: int = MAX_HIGHLIGHTS, **kwargs):
        super().__init__(*args, **kwargs)
        # A record holds at most MAX_HIGHLIGHTS entries
        self.max_highlights = max(0, min(max_highlights, MAX_HIGHLIGHTS))

    async def request_highlights(
        self,
        clip: ClipReference,
        frames: Sequence[FrameSample],
        subject: SubjectContext,
        mode: Union[EvaluationMode, str],
    ) -> List[Highlight]:
        mode = EvaluationMode.parse(mode)
        if not self.is_configured:
            logger.warning("Vision inference service not configured, skipping highlights")
            return []

        instructions = HIGHLIGHTS_PROMPT.format(label=mode.label, display_name=subject.display_name)
        raw = await self._request_mapping(instructions, frames)

        entries = raw.get("highlights")
        if not isinstance(entries, list):
            logger.warning("Model output had no highlight list")
            return []

        highlights = [h for h in (Highlight.from_wire(entry) for entry in entries) if h is not None]
        return highlights[:self.max_highlights]
