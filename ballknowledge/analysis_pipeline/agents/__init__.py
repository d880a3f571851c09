from .analysis_agent import AnalysisOrchestrator, PipelineState

__all__ = ["AnalysisOrchestrator", "PipelineState"]
