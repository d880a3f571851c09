from .evaluation import MODE_PROFILES, EvaluationRequester, ModeProfile
from .extraction import ResilientRecordExtractor, extract_record
from .highlights import HighlightRequester
from .probe import probe_clip
from .sampling import TimestampSampler, sample_frames

__all__ = [
    "MODE_PROFILES",
    "EvaluationRequester",
    "ModeProfile",
    "ResilientRecordExtractor",
    "extract_record",
    "HighlightRequester",
    "probe_clip",
    "TimestampSampler",
    "sample_frames",
]
