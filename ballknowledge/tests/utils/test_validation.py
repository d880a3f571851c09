import pytest

from ballknowledge.analysis_pipeline.models import EvaluationMode
from ballknowledge.exceptions import InvalidRequest
from ballknowledge.utils.validation import AnalysisRequest


def test_payload_to_pipeline_inputs():
    request = AnalysisRequest.from_payload({
        "videoUrl": " https://cdn.example.com/u/1.mp4 ",
        "duration": 42,
        "videoType": "training",
        "candidateInfo": {"name": "Ana Ruiz", "position": "Winger", "age": 17},
    })
    clip, subject, mode = request.to_inputs()

    assert clip.locator == "https://cdn.example.com/u/1.mp4"
    assert clip.declared_duration_seconds == 42
    assert subject.display_name == "Ana Ruiz"
    assert subject.role == "Winger"
    assert mode is EvaluationMode.PRACTICE


def test_missing_candidate_info_and_duration_use_defaults():
    clip, subject, mode = AnalysisRequest.from_payload(
        {"videoUrl": "https://cdn.example.com/u/2.mp4", "videoType": "game", "candidateInfo": None}
    ).to_inputs()

    assert clip.declared_duration_seconds == 60
    assert subject.display_name == "Unknown Player"
    assert subject.role == "Unknown"
    assert mode is EvaluationMode.COMPETITIVE


@pytest.mark.parametrize(
    "payload",
    [
        {"videoType": "game"},
        {"videoUrl": "", "videoType": "game"},
        {"videoUrl": 12, "videoType": "game"},
        {"videoUrl": "https://cdn.example.com/u/3.mp4"},
        {"videoUrl": "https://cdn.example.com/u/3.mp4", "videoType": "match"},
        {},
    ],
)
def test_invalid_payloads(payload):
    with pytest.raises(InvalidRequest):
        AnalysisRequest.from_payload(payload)


def test_missing_url_message():
    with pytest.raises(InvalidRequest, match="Video URL required"):
        AnalysisRequest.from_payload({"videoUrl": "   ", "videoType": "game"})
