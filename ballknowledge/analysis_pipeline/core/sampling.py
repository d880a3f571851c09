import math
from typing import List

from ballknowledge.analysis_pipeline.models import FrameSample

SECONDS_PER_FRAME = 10.0
MIN_FRAMES = 5
MAX_FRAMES = 10


class TimestampSampler:
    """
    Turns a clip duration into evenly spaced time-offset references.

    The sampler never decodes video. Each sample is the clip locator with a
    media-fragment marker (``#t=12.0``) that the vision model resolves itself.
    """

    def __init__(
        self,
        seconds_per_frame: float = SECONDS_PER_FRAME,
        min_frames: int = MIN_FRAMES,
        max_frames: int = MAX_FRAMES,
    ):
        if seconds_per_frame <= 0:
            raise ValueError("seconds_per_frame must be positive")
        if min_frames < 1 or max_frames < min_frames:
            raise ValueError("frame bounds must satisfy 1 <= min_frames <= max_frames")
        self.seconds_per_frame = seconds_per_frame
        self.min_frames = min_frames
        self.max_frames = max_frames

    def frame_count(self, duration_seconds: float) -> int:
        duration = _usable_duration(duration_seconds)
        return min(self.max_frames, max(self.min_frames, math.floor(duration / self.seconds_per_frame)))

    def sample(self, duration_seconds: float, locator: str = "") -> List[FrameSample]:
        """Evenly spaced samples starting at offset 0; durations <= 0 give interval 0."""
        duration = _usable_duration(duration_seconds)
        count = self.frame_count(duration)
        interval = duration / count

        return [
            FrameSample(offset_seconds=i * interval, reference=f"{locator}#t={i * interval:.1f}")
            for i in range(count)
        ]


def _usable_duration(duration_seconds) -> float:
    try:
        duration = float(duration_seconds)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(duration) or duration <= 0:
        return 0.0
    return duration


_default_sampler = TimestampSampler()


def sample_frames(duration_seconds: float, locator: str = "") -> List[FrameSample]:
    return _default_sampler.sample(duration_seconds, locator)
