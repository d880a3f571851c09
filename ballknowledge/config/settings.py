from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, PrivateAttr
from typing import Optional
from dotenv import load_dotenv, find_dotenv


class InferenceConfig(BaseSettings):
    """Vision inference service configuration."""

    provider: str = Field(default="openai")
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("api_key", "INFERENCE_API_KEY", "OPENAI_API_KEY"),
    )
    endpoint: Optional[str] = Field(default=None)
    deployment_name: Optional[str] = Field(default=None)
    api_version: str = Field(default="2024-08-01-preview")
    model_name: str = Field(default="gpt-4o")
    use_managed_identity: bool = Field(default=False)
    timeout: float = Field(default=120.0, gt=0)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=4000, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="INFERENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        # Force load environment variables before validation
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)


class AnalysisConfig(BaseSettings):
    """Frame sampling and pipeline behaviour."""

    seconds_per_frame: float = Field(default=10.0, gt=0)
    min_frames: int = Field(default=5, ge=1)
    max_frames: int = Field(default=10, ge=1)
    max_visual_references: int = Field(default=10, ge=0)
    max_highlights: int = Field(default=5, ge=0, le=5)
    probe_clip: bool = Field(default=False)
    probe_timeout: float = Field(default=10.0, gt=0)
    concurrent_highlights: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="ANALYSIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        load_dotenv(find_dotenv())
        super().__init__(**kwargs)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    enable_json: bool = Field(default=False)
    enable_file_logging: bool = Field(default=False)
    max_file_size: str = Field(default="10 MB")
    retention_days: int = Field(default=7)

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )


class BallKnowledgeConfig(BaseSettings):
    """Main configuration class."""

    _inference: Optional[InferenceConfig] = PrivateAttr(default=None)
    _analysis: Optional[AnalysisConfig] = PrivateAttr(default=None)
    _logging: Optional[LoggingConfig] = PrivateAttr(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        case_sensitive=False
    )

    def __init__(self, **kwargs):
        # Force load environment variables before initializing
        load_dotenv(find_dotenv())

        super().__init__(**kwargs)

    @property
    def inference(self) -> InferenceConfig:
        if self._inference is None:
            self._inference = InferenceConfig()
        return self._inference

    @property
    def analysis(self) -> AnalysisConfig:
        if self._analysis is None:
            self._analysis = AnalysisConfig()
        return self._analysis

    @property
    def logging(self) -> LoggingConfig:
        if self._logging is None:
            self._logging = LoggingConfig()
        return self._logging
