from .agents.analysis_agent import AnalysisOrchestrator, PipelineState
from .core.evaluation import EvaluationRequester
from .core.extraction import ResilientRecordExtractor
from .core.highlights import HighlightRequester
from .core.sampling import TimestampSampler
from .models import (
    AnalysisRecord,
    ClipReference,
    EvaluationMode,
    FrameSample,
    Highlight,
    SubjectContext,
)

__all__ = [
    "AnalysisOrchestrator",
    "PipelineState",
    "EvaluationRequester",
    "ResilientRecordExtractor",
    "HighlightRequester",
    "TimestampSampler",
    "AnalysisRecord",
    "ClipReference",
    "EvaluationMode",
    "FrameSample",
    "Highlight",
    "SubjectContext",
]
