from .vision_provider import OpenAIVisionProvider

__all__ = [
    'OpenAIVisionProvider',
]
