from .vision_provider import AzureVisionProvider

__all__ = [
    "AzureVisionProvider",
]
