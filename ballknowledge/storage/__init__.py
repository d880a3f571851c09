from .base import AnalysisStore

__all__ = ["AnalysisStore"]
