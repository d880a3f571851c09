import asyncio
import functools
from typing import Any, Callable, Dict, Type, TypeVar

from loguru import logger

from ..exceptions import (
    BallKnowledgeException,
    ConfigurationException,
    InvalidRequest,
    ServiceUnavailable,
    UpstreamError,
)

T = TypeVar('T')

__all__ = [
    "convert_exceptions",
    "ErrorHandler",
    "BallKnowledgeException",
    "ConfigurationException",
    "InvalidRequest",
    "ServiceUnavailable",
    "UpstreamError",
]


def _convert(e: Exception, exception_map: Dict[Type[Exception], Type[BallKnowledgeException]]):
    if isinstance(e, BallKnowledgeException):
        return None
    for source_exc, target_exc in exception_map.items():
        if isinstance(e, source_exc):
            return target_exc(str(e), details={"original_exception": type(e).__name__})
    return None


def convert_exceptions(exception_map: Dict[Type[Exception], Type[BallKnowledgeException]]):
    """
    Decorator to convert foreign exceptions to framework exceptions.

    Exceptions that already belong to the framework hierarchy are re-raised untouched,
    so a ServiceUnavailable raised inside the wrapped call is never rewrapped.

    Args:
        exception_map: Dictionary mapping exception types to framework exception types
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                converted = _convert(e, exception_map)
                if converted is None:
                    raise
                raise converted from e

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                converted = _convert(e, exception_map)
                if converted is None:
                    raise
                raise converted from e

        # Return appropriate wrapper based on function type
        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator


class ErrorHandler:
    """Centralized error handling utilities."""

    @staticmethod
    def handle_provider_error(e: Exception, provider_name: str) -> UpstreamError:
        """Convert provider-specific exceptions to UpstreamError."""
        error_details: Dict[str, Any] = {
            "provider": provider_name,
            "original_exception": type(e).__name__,
            "message": str(e)
        }
        status_code = getattr(e, "status_code", None)
        if status_code is not None:
            error_details["status_code"] = status_code

        logger.error(f"Provider {provider_name} error: {e}")
        return UpstreamError(
            f"Provider {provider_name} failed: {e}",
            details=error_details
        )
