from .vision_provider import VisionInferenceService

__all__ = [
    'VisionInferenceService',
]
