import math

import pytest

from ballknowledge.analysis_pipeline.core.sampling import TimestampSampler, sample_frames


@pytest.mark.parametrize("duration", [0.5, 10, 30, 49.9, 50])
def test_short_clips_get_minimum_frames(duration):
    assert len(sample_frames(duration)) == 5


@pytest.mark.parametrize("duration", [100, 150, 3600])
def test_long_clips_are_capped(duration):
    assert len(sample_frames(duration)) == 10


def test_count_is_monotonic_and_bounded():
    counts = [len(sample_frames(d)) for d in range(0, 121)]
    assert all(5 <= c <= 10 for c in counts)
    assert counts == sorted(counts)
    assert len(sample_frames(75)) == 7


def test_offsets_are_evenly_spaced():
    frames = sample_frames(95, "https://cdn.example.com/a.mp4")
    interval = 95 / 9
    assert frames[0].offset_seconds == 0
    for earlier, later in zip(frames, frames[1:]):
        assert later.offset_seconds - earlier.offset_seconds == pytest.approx(interval)


def test_reference_carries_offset_marker():
    frames = sample_frames(60, "https://cdn.example.com/a.mp4")
    assert [f.reference for f in frames][:2] == [
        "https://cdn.example.com/a.mp4#t=0.0",
        "https://cdn.example.com/a.mp4#t=10.0",
    ]


@pytest.mark.parametrize("duration", [0, -20, float("nan"), None, "abc"])
def test_degenerate_durations_never_raise(duration):
    frames = sample_frames(duration)
    assert len(frames) == 5
    assert all(f.offset_seconds == 0 for f in frames)
    assert not any(math.isnan(f.offset_seconds) for f in frames)


def test_custom_bounds():
    sampler = TimestampSampler(seconds_per_frame=5, min_frames=2, max_frames=4)
    assert sampler.frame_count(3) == 2
    assert sampler.frame_count(15) == 3
    assert sampler.frame_count(100) == 4


def test_invalid_bounds_rejected():
    with pytest.raises(ValueError):
        TimestampSampler(min_frames=6, max_frames=5)
