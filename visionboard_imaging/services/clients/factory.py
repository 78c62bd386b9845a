# visionboard_imaging/services/clients/factory.py
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from visionboard_imaging.data.settings import GeminiConfig, Settings, settings

from .google_ai_client import create_google_client
from .mock_ai_client import MockGenAIClient

_CLIENT_BUILDERS: dict[str, Callable[[GeminiConfig], Any]] = {
    "google": create_google_client,
    "mock": lambda _config: MockGenAIClient(),
}


def get_ai_client(app_settings: Settings | None = None) -> Any:
    """
    Creates the backend client named by `GEMINI__CLIENT`.
    The returned object exposes `aio.models.generate_content` and `aio.models.generate_images`.
    """
    config = (app_settings or settings).gemini
    builder = _CLIENT_BUILDERS.get(config.client.lower())
    if builder is None:
        raise ValueError(f"Unknown client type specified in config: '{config.client}'")
    return builder(config)


def describe_backend(app_settings: Settings | None = None) -> str:
    config = (app_settings or settings).gemini
    if config.client.lower() == "mock":
        return "mock"
    return "vertex_ai" if config.vertexai else "gemini_api"
