from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..analysis_pipeline.models import ClipReference, EvaluationMode, SubjectContext
from ..exceptions import InvalidRequest


class CandidateInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    position: Optional[str] = None


class AnalysisRequest(BaseModel):
    """Inbound analyze payload as posted by the web client."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    video_url: str = Field(..., alias="videoUrl", min_length=1)
    duration: Optional[Any] = None
    video_type: str = Field(..., alias="videoType")
    candidate_info: CandidateInfo = Field(default_factory=CandidateInfo, alias="candidateInfo")

    @field_validator("video_url", mode="before")
    @classmethod
    def validate_video_url(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise InvalidRequest("Video URL required")
        return v.strip()

    @field_validator("video_type", mode="before")
    @classmethod
    def validate_video_type(cls, v):
        return EvaluationMode.parse(v).value

    @field_validator("candidate_info", mode="before")
    @classmethod
    def default_candidate_info(cls, v):
        return v or {}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AnalysisRequest":
        """Validate a raw payload, raising InvalidRequest on any problem."""
        try:
            return cls.model_validate(dict(payload or {}))
        except InvalidRequest:
            raise
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ()))
            raise InvalidRequest(
                f"Invalid analysis request: {field}: {first.get('msg')}",
                details={"errors": [err.get("msg") for err in e.errors()]},
            ) from e

    def to_inputs(self) -> Tuple[ClipReference, SubjectContext, EvaluationMode]:
        clip = ClipReference(locator=self.video_url, declared_duration_seconds=self.duration)
        subject = SubjectContext(display_name=self.candidate_info.name, role=self.candidate_info.position)
        return clip, subject, EvaluationMode(self.video_type)
