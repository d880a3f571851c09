"""Ball Knowledge: vision-model evaluation of soccer game and training clips."""

from .analysis_pipeline import (
    AnalysisOrchestrator,
    AnalysisRecord,
    ClipReference,
    EvaluationMode,
    Highlight,
    SubjectContext,
)
from .exceptions import (
    BallKnowledgeException,
    ConfigurationException,
    InvalidRequest,
    ServiceUnavailable,
    UpstreamError,
)

__all__ = [
    "AnalysisOrchestrator",
    "AnalysisRecord",
    "ClipReference",
    "EvaluationMode",
    "Highlight",
    "SubjectContext",
    "BallKnowledgeException",
    "ConfigurationException",
    "InvalidRequest",
    "ServiceUnavailable",
    "UpstreamError",
]
