import asyncio
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from loguru import logger
from pydantic import ValidationError

from ballknowledge.analysis_pipeline.core.evaluation import EvaluationRequester
from ballknowledge.analysis_pipeline.core.highlights import HighlightRequester
from ballknowledge.analysis_pipeline.core.probe import probe_clip
from ballknowledge.analysis_pipeline.core.sampling import TimestampSampler
from ballknowledge.analysis_pipeline.models import (
    AnalysisRecord,
    ClipReference,
    EvaluationMode,
    FrameSample,
    Highlight,
    SubjectContext,
)
from ballknowledge.config.settings import BallKnowledgeConfig
from ballknowledge.exceptions import BallKnowledgeException, InvalidRequest, UpstreamError
from ballknowledge.providers.base import VisionInferenceService
from ballknowledge.providers.factory import provider_factory
from ballknowledge.utils.logging_config import log_manager

_UNSET = object()


class PipelineState(str, Enum):
    PENDING = "pending"
    FRAMES_SAMPLED = "frames_sampled"
    EVALUATED = "evaluated"
    HIGHLIGHTS_EXTRACTED = "highlights_extracted"
    COMPOSED = "composed"
    FAILED = "failed"


class AnalysisOrchestrator:
    """
    Public entry point of the analysis pipeline.

    One ``analyze`` call samples frame references from the clip, asks the vision
    model for the mode-specific evaluation, asks it again for highlights, and
    composes an ``AnalysisRecord``. The orchestrator holds no per-request state,
    so concurrent calls for unrelated clips need no coordination.

    Any failure is fatal and surfaces unchanged to the caller: either a complete
    record comes back or a typed exception is raised. Nothing is retried.

    Args:
        service: Vision inference service, or None when none is configured
        sampler: Frame sampler (defaults to 5-10 samples, one per 10 seconds)
        evaluation_requester: Requester for the evaluation pass
        highlight_requester: Requester for the highlight pass
        probe_clips: Check the clip locator answers before sampling
        probe_timeout: Seconds allowed for the probe
        concurrent_highlights: Run the evaluation and highlight passes together

    Example:
        ```python
        orchestrator = AnalysisOrchestrator.from_config()
        record = await orchestrator.analyze(
            ClipReference(locator="https://cdn.example.com/clip.mp4", declared_duration_seconds=95),
            SubjectContext(display_name="Sam Carter", role="Midfielder"),
            EvaluationMode.COMPETITIVE,
        )
        print(record.evaluation.get("playerGrade"))
        ```
    """

    def __init__(
        self,
        service: Optional[VisionInferenceService],
        sampler: Optional[TimestampSampler] = None,
        evaluation_requester: Optional[EvaluationRequester] = None,
        highlight_requester: Optional[HighlightRequester] = None,
        probe_clips: bool = False,
        probe_timeout: float = 10.0,
        concurrent_highlights: bool = False,
    ):
        self.service = service
        self.sampler = sampler or TimestampSampler()
        self.evaluation_requester = evaluation_requester or EvaluationRequester(service)
        self.highlight_requester = highlight_requester or HighlightRequester(service)
        self.probe_clips = probe_clips
        self.probe_timeout = probe_timeout
        self.concurrent_highlights = concurrent_highlights

    @classmethod
    def from_config(
        cls,
        config: Optional[BallKnowledgeConfig] = None,
        service: Union[VisionInferenceService, None, object] = _UNSET,
    ) -> "AnalysisOrchestrator":
        """Build the pipeline from configuration. The service is created unless one (or None) is passed."""
        config = config or BallKnowledgeConfig()
        log_manager.configure(config.logging)
        inference = config.inference
        analysis = config.analysis

        if service is _UNSET:
            service = provider_factory.create_vision_service(inference)

        requester_options = dict(
            temperature=inference.temperature,
            max_output_tokens=inference.max_output_tokens,
            max_visual_references=analysis.max_visual_references,
        )
        return cls(
            service,
            sampler=TimestampSampler(
                seconds_per_frame=analysis.seconds_per_frame,
                min_frames=analysis.min_frames,
                max_frames=analysis.max_frames,
            ),
            evaluation_requester=EvaluationRequester(service, **requester_options),
            highlight_requester=HighlightRequester(
                service, max_highlights=analysis.max_highlights, **requester_options
            ),
            probe_clips=analysis.probe_clip,
            probe_timeout=analysis.probe_timeout,
            concurrent_highlights=analysis.concurrent_highlights,
        )

    async def analyze(
        self,
        clip: Union[ClipReference, Mapping[str, Any]],
        subject: Union[SubjectContext, Mapping[str, Any], None],
        mode: Union[EvaluationMode, str],
        timeout: Optional[float] = None,
    ) -> AnalysisRecord:
        """
        Run the full pipeline for one clip.

        Args:
            clip: ClipReference, or a mapping with ``locator`` and ``declaredDurationSeconds``
            subject: SubjectContext, or a mapping with ``displayName`` and ``role``
            mode: Evaluation mode (``"game"`` or ``"training"``)
            timeout: Overall deadline in seconds for the whole pipeline

        Returns:
            AnalysisRecord: The composed record, ready for the caller to persist.

        Raises:
            InvalidRequest: Missing or malformed locator, or unknown mode
            ServiceUnavailable: No inference service configured
            UpstreamError: The service call failed, or the deadline passed
        """
        progress = {"state": PipelineState.PENDING}
        if timeout is None:
            return await self._run(clip, subject, mode, progress)
        try:
            return await asyncio.wait_for(self._run(clip, subject, mode, progress), timeout)
        except asyncio.TimeoutError as e:
            failed_at = progress["state"].value
            logger.error(f"Analysis exceeded its {timeout}s deadline after '{failed_at}'")
            raise UpstreamError(
                f"Analysis exceeded its {timeout}s deadline",
                error_code="DEADLINE_EXCEEDED",
                details={"failed_at": failed_at, "state": PipelineState.FAILED.value, "timeout": timeout},
            ) from e

    async def _run(self, clip, subject, mode, progress: Dict[str, PipelineState]) -> AnalysisRecord:
        try:
            clip, subject, mode = self._validate(clip, subject, mode)
            logger.info(f"Starting {mode.value} analysis for {subject.display_name}")

            frames = await self._sample(clip)
            self._advance(progress, PipelineState.FRAMES_SAMPLED, f"{len(frames)} frames")

            if self.concurrent_highlights:
                evaluation, highlights = await self._evaluate_concurrently(clip, frames, subject, mode)
                self._advance(progress, PipelineState.EVALUATED)
            else:
                evaluation = await self.evaluation_requester.request_evaluation(clip, frames, subject, mode)
                self._advance(progress, PipelineState.EVALUATED, f"{len(evaluation)} fields")
                highlights = await self.highlight_requester.request_highlights(clip, frames, subject, mode)
            self._advance(progress, PipelineState.HIGHLIGHTS_EXTRACTED, f"{len(highlights)} highlights")

            record = AnalysisRecord(
                mode=mode,
                subject=subject,
                clip=clip,
                evaluation=evaluation,
                highlights=highlights,
            )
            self._advance(progress, PipelineState.COMPOSED, record.id)
            return record
        except BallKnowledgeException as e:
            failed_at = progress["state"].value
            e.details.setdefault("failed_at", failed_at)
            e.details["state"] = PipelineState.FAILED.value
            logger.error(f"Analysis failed after '{failed_at}': {e}")
            raise

    def _validate(self, clip, subject, mode) -> Tuple[ClipReference, SubjectContext, EvaluationMode]:
        try:
            if not isinstance(clip, ClipReference):
                clip = ClipReference.model_validate(dict(clip or {}))
            if not isinstance(subject, SubjectContext):
                subject = SubjectContext.model_validate(dict(subject or {}))
        except (ValidationError, TypeError, ValueError) as e:
            raise InvalidRequest(f"Malformed analysis request: {e}") from e

        if not clip.locator:
            raise InvalidRequest("Video URL required", details={"field": "locator"})
        parsed = urlparse(clip.locator)
        if not parsed.scheme or not (parsed.netloc or parsed.path) or any(c.isspace() for c in clip.locator):
            raise InvalidRequest(
                f"Malformed clip locator: {clip.locator!r}", details={"field": "locator"}
            )

        return clip, subject, EvaluationMode.parse(mode)

    async def _sample(self, clip: ClipReference) -> List[FrameSample]:
        if self.probe_clips and not await probe_clip(clip.locator, timeout=self.probe_timeout):
            logger.warning("Clip locator unreachable, continuing without visual references")
            return []
        return self.sampler.sample(clip.declared_duration_seconds, clip.locator)

    async def _evaluate_concurrently(
        self,
        clip: ClipReference,
        frames: List[FrameSample],
        subject: SubjectContext,
        mode: EvaluationMode,
    ) -> Tuple[Dict[str, Any], List[Highlight]]:
        """Both passes as tasks; the first failure cancels the other and propagates."""
        evaluation_task = asyncio.ensure_future(
            self.evaluation_requester.request_evaluation(clip, frames, subject, mode)
        )
        highlight_task = asyncio.ensure_future(
            self.highlight_requester.request_highlights(clip, frames, subject, mode)
        )
        tasks = (evaluation_task, highlight_task)
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        errors = [task.exception() for task in tasks if not task.cancelled()]
        for error in errors:
            if error is not None:
                raise error
        return evaluation_task.result(), highlight_task.result()

    @staticmethod
    def _advance(progress: Dict[str, PipelineState], new: PipelineState, note: str = ""):
        suffix = f" ({note})" if note else ""
        logger.info(f"Pipeline {progress['state'].value} -> {new.value}{suffix}")
        progress["state"] = new
