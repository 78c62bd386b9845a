# visionboard_imaging/services/clients/__init__.py
from .factory import describe_backend, get_ai_client
from .mock_ai_client import MockGenAIClient

__all__ = [
    "MockGenAIClient",
    "describe_backend",
    "get_ai_client",
]
