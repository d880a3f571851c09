from typing import Dict, Optional


class BallKnowledgeException(Exception):
    """Base exception for the analysis framework."""

    error_code_default: Optional[str] = None

    def __init__(self, message: str, error_code: str = None, details: Dict = None):
        super().__init__(message)
        self.error_code = error_code or self.error_code_default
        self.details = details or {}


class InvalidRequest(BallKnowledgeException):
    """Raised when the clip locator or evaluation mode is missing or malformed."""

    error_code_default = "INVALID_REQUEST"


class ServiceUnavailable(BallKnowledgeException):
    """Raised when no inference service is configured."""

    error_code_default = "SERVICE_UNAVAILABLE"


class UpstreamError(BallKnowledgeException):
    """Raised when the inference service was reached but the call failed."""

    error_code_default = "UPSTREAM_ERROR"


class ConfigurationException(BallKnowledgeException):
    """Raised when configuration is invalid."""

    error_code_default = "CONFIGURATION_ERROR"
