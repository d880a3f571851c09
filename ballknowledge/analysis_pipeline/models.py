"""
pydantic models for the analysis pipeline inputs, the structured records parsed
from the vision model, and the composed analysis record handed to persistence.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union
from uuid import uuid4

from loguru import logger
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from ballknowledge.exceptions import InvalidRequest

DEFAULT_DURATION_SECONDS = 60.0
UNKNOWN_PLAYER = "Unknown Player"
UNKNOWN_ROLE = "Unknown"


class EvaluationMode(str, Enum):
    """Which scoring schema governs a request: competitive play or a practice session."""

    COMPETITIVE = "game"
    PRACTICE = "training"

    @property
    def label(self) -> str:
        return "game footage" if self is EvaluationMode.COMPETITIVE else "training session"

    @classmethod
    def parse(cls, value: Union["EvaluationMode", str, None]) -> "EvaluationMode":
        """Resolve a mode from a member, its wire value or its name; InvalidRequest otherwise."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value, member.name.lower()):
                    return member
        raise InvalidRequest(
            f'Evaluation mode must be "game" or "training", got {value!r}',
            details={"mode": repr(value)},
        )


class ClipReference(BaseModel):
    """The uploaded video under evaluation, referenced by locator only."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    locator: Optional[str] = None
    declared_duration_seconds: float = DEFAULT_DURATION_SECONDS

    @field_validator("locator", mode="before")
    @classmethod
    def _strip_locator(cls, v):
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("declared_duration_seconds", mode="before")
    @classmethod
    def _coerce_duration(cls, v):
        try:
            duration = float(v)
        except (TypeError, ValueError):
            return DEFAULT_DURATION_SECONDS
        if math.isnan(duration) or math.isinf(duration) or duration <= 0:
            return DEFAULT_DURATION_SECONDS
        return duration

    @property
    def duration_minutes(self) -> str:
        return f"{self.declared_duration_seconds / 60:.1f}"


class SubjectContext(BaseModel):
    """Who is being evaluated."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    display_name: str = UNKNOWN_PLAYER
    role: str = UNKNOWN_ROLE

    @field_validator("display_name", mode="before")
    @classmethod
    def _default_name(cls, v):
        return str(v).strip() if v is not None and str(v).strip() else UNKNOWN_PLAYER

    @field_validator("role", mode="before")
    @classmethod
    def _default_role(cls, v):
        return str(v).strip() if v is not None and str(v).strip() else UNKNOWN_ROLE


class FrameSample(BaseModel):
    """A time offset into the clip and the locator annotated with that offset."""

    model_config = ConfigDict(frozen=True)

    offset_seconds: float
    reference: str


class Highlight(BaseModel):
    """A notable moment; time_mark is an opaque mm:ss label from the model."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time_mark: str = Field(default="", alias="timestamp")
    description: str
    quality_tag: str = Field(default="", alias="quality")

    @field_validator("time_mark", "quality_tag", mode="before")
    @classmethod
    def _stringify(cls, v):
        return "" if v is None else str(v).strip()

    @field_validator("description", mode="before")
    @classmethod
    def _require_description(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("description must be a non-empty string")
        return v.strip()

    @classmethod
    def from_wire(cls, entry: Any) -> Optional["Highlight"]:
        """Build from one model-emitted entry; None if the entry is unusable."""
        if not isinstance(entry, Mapping):
            return None
        try:
            return cls.model_validate(dict(entry))
        except ValidationError as e:
            logger.debug(f"Skipping malformed highlight {entry!r}: {e.errors()[0]['msg']}")
            return None

    def to_wire(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


# --------------------------------------------------------------------------
# Evaluation record schemas
# --------------------------------------------------------------------------

def _within(low: float, high: float):
    def check(v: Union[int, float]) -> Union[int, float]:
        if not low <= v <= high:
            raise ValueError(f"must be between {low} and {high}")
        return v
    return check


def _not_bool(v: Any) -> Any:
    if isinstance(v, bool):
        raise ValueError("must be a number, not a boolean")
    return v


def _one_decimal(v: Union[int, float]) -> Union[int, float]:
    return round(v, 1) if isinstance(v, float) else v


SubScore = Annotated[Union[int, float], BeforeValidator(_not_bool), AfterValidator(_within(0, 100))]
Grade = Annotated[
    Union[int, float], BeforeValidator(_not_bool), AfterValidator(_within(0, 10)), AfterValidator(_one_decimal)
]


class EvaluationSchema(BaseModel):
    """
    Base for the per-mode record shapes. Every field is optional: a key the model
    did not emit stays absent from the record rather than defaulting to zero.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @classmethod
    def conform(cls, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Keep each key of the extracted mapping that validates against this schema.

        Keys are checked one at a time so that a single malformed value (a score
        that is not a number, say) drops only that key. Null values are treated
        as absent. Unknown keys are kept as emitted.
        """
        # Field name or wire alias -> wire alias
        wire_keys = {name: field.alias or name for name, field in cls.model_fields.items()}
        wire_keys.update({alias: alias for alias in wire_keys.values()})

        record: Dict[str, Any] = {}
        for key, value in raw.items():
            if value is None:
                continue
            if key not in wire_keys:
                record[key] = value
                continue
            try:
                validated = cls.model_validate({key: value})
            except ValidationError as e:
                logger.warning(f"Dropping field '{key}' from {cls.__name__}: {e.errors()[0]['msg']}")
                continue
            wire_key = wire_keys[key]
            record[wire_key] = validated.model_dump(by_alias=True, exclude_unset=True)[wire_key]
        return record


class DetailedAnalysis(BaseModel):
    model_config = ConfigDict(extra="allow")

    technical: Optional[str] = None
    tactical: Optional[str] = None
    physical: Optional[str] = None
    mental: Optional[str] = None


class CompetitiveEvaluation(EvaluationSchema):
    """Game footage evaluation."""

    summary: Optional[str] = None
    strengths: Optional[List[str]] = None
    areas_to_improve: Optional[List[str]] = None
    pass_completion: Optional[SubScore] = None
    first_touch: Optional[SubScore] = None
    game_awareness: Optional[SubScore] = None
    defensive_work: Optional[SubScore] = None
    player_grade: Optional[Grade] = None
    detailed_analysis: Optional[DetailedAnalysis] = None


class PracticeEvaluation(EvaluationSchema):
    """Training session evaluation."""

    session_summary: Optional[str] = None
    skill_focus: Optional[str] = None
    current_level: Optional[Literal["Beginner", "Intermediate", "Advanced"]] = None
    technical_analysis: Optional[str] = None
    improvement_tips: Optional[List[str]] = None
    practice_progression: Optional[List[str]] = None
    youtube_recommendations: Optional[List[str]] = None

    @field_validator("current_level", mode="before")
    @classmethod
    def _normalise_tier(cls, v):
        if isinstance(v, str):
            return v.strip().capitalize()
        return v


# Evaluation keys surfaced at the top level of the response body
FLATTENED_FIELDS = (
    "skillFocus",
    "currentLevel",
    "improvementTips",
    "technicalAnalysis",
    "practiceProgression",
    "youtubeRecommendations",
    "sessionSummary",
    "strengths",
    "areasToImprove",
    "playerGrade",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisRecord(BaseModel):
    """The composed result of one analysis, handed to the caller for persistence."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    mode: EvaluationMode
    subject: SubjectContext
    clip: ClipReference
    evaluation: Dict[str, Any]
    highlights: List[Highlight] = Field(default_factory=list, max_length=5)
    created_at: datetime = Field(default_factory=_utc_now)

    @property
    def summary(self) -> Optional[str]:
        return self.evaluation.get("summary") or self.evaluation.get("sessionSummary")

    def to_document(self) -> Dict[str, Any]:
        """JSON-safe mapping for a semi-structured store."""
        document = self.model_dump(mode="json", exclude={"highlights"})
        document["highlights"] = [h.to_wire() for h in self.highlights]
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "AnalysisRecord":
        return cls.model_validate(dict(document))

    def to_response(self) -> Dict[str, Any]:
        """Response body with the evaluation's headline fields flattened to the top level."""
        response: Dict[str, Any] = {
            "ok": True,
            "id": self.id,
            "videoType": self.mode.value,
            "videoUrl": self.clip.locator,
            "candidateName": self.subject.display_name,
            "position": self.subject.role,
            "analysis": dict(self.evaluation),
            "highlights": [h.to_wire() for h in self.highlights],
            "createdAt": int(self.created_at.timestamp() * 1000),
        }
        if self.summary is not None:
            response["summary"] = self.summary
        for key in FLATTENED_FIELDS:
            if key in self.evaluation:
                response[key] = self.evaluation[key]
        return response
