from .settings import AnalysisConfig, BallKnowledgeConfig, InferenceConfig, LoggingConfig

__all__ = ["AnalysisConfig", "BallKnowledgeConfig", "InferenceConfig", "LoggingConfig"]
