from dataclasses import dataclass
from typing import Any, Dict, Sequence, Type, Union

from loguru import logger

from ballknowledge.analysis_pipeline.core.requester import VisionRequester
from ballknowledge.analysis_pipeline.models import (
    ClipReference,
    CompetitiveEvaluation,
    EvaluationMode,
    EvaluationSchema,
    FrameSample,
    PracticeEvaluation,
    SubjectContext,
)
from ballknowledge.analysis_pipeline.prompts_and_description import (
    COMPETITIVE_EVALUATION_PROMPT,
    PRACTICE_EVALUATION_PROMPT,
)
from ballknowledge.exceptions import ServiceUnavailable


@dataclass(frozen=True)
class ModeProfile:
    """Everything that differs between evaluation modes."""

    mode: EvaluationMode
    prompt_template: str
    schema: Type[EvaluationSchema]

    def render_instructions(self, clip: ClipReference, subject: SubjectContext) -> str:
        return self.prompt_template.format(
            duration_minutes=clip.duration_minutes,
            display_name=subject.display_name,
            role=subject.role,
        )


MODE_PROFILES = {
    EvaluationMode.COMPETITIVE: ModeProfile(
        EvaluationMode.COMPETITIVE, COMPETITIVE_EVALUATION_PROMPT, CompetitiveEvaluation
    ),
    EvaluationMode.PRACTICE: ModeProfile(
        EvaluationMode.PRACTICE, PRACTICE_EVALUATION_PROMPT, PracticeEvaluation
    ),
}


class EvaluationRequester(VisionRequester):
    """Requests the mode-specific evaluation record from the vision model."""

    async def request_evaluation(
        self,
        clip: ClipReference,
        frames: Sequence[FrameSample],
        subject: SubjectContext,
        mode: Union[EvaluationMode, str],
    ) -> Dict[str, Any]:
        """
        Run the evaluation call for one clip.

        Args:
            clip: Clip under evaluation
            frames: Sampled frame references; only the first ten are sent
            subject: Player name and position
            mode: Competitive or practice evaluation

        Returns:
            Evaluation mapping holding only the fields the model actually produced.

        Raises:
            InvalidRequest: If the mode is not recognised
            ServiceUnavailable: If no inference service is configured
            UpstreamError: If the service call fails
        """
        profile = MODE_PROFILES[EvaluationMode.parse(mode)]
        if not self.is_configured:
            raise ServiceUnavailable("Vision inference service not configured")

        raw = await self._request_mapping(profile.render_instructions(clip, subject), frames)
        record = profile.schema.conform(raw)
        logger.info(f"{profile.mode.value} evaluation parsed with {len(record)} fields")
        return record
