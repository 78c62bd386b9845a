# visionboard_imaging/services/clients/mock_ai_client.py
from __future__ import annotations

import asyncio
import io
from collections.abc import Iterable
from types import SimpleNamespace
from typing import Any

import structlog
from google.genai import errors as genai_errors
from PIL import Image

logger = structlog.get_logger(__name__)

_VALIDATION_JSON = (
    '{"likeness_score": 0.9, "face_match": true, "skin_tone_match": true, '
    '"age_match": true, "body_type_match": true, "overall_recognizable": true, '
    '"explanation": "Mock validation: the generated person matches the references.", '
    '"issues": [], "suggestions": []}'
)


def render_placeholder_png(color: str = "gray", size: tuple[int, int] = (64, 64)) -> bytes:
    """A solid-colour PNG used in place of a generated image."""
    img = Image.new("RGB", size, color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def _not_found(model: str) -> genai_errors.ClientError:
    return genai_errors.ClientError(
        404,
        {
            "error": {
                "code": 404,
                "message": f"models/{model} is not found for API version v1beta.",
                "status": "NOT_FOUND",
            }
        },
    )


def _content_response(parts: list[Any], finish_reason: str = "STOP") -> SimpleNamespace:
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=parts),
        finish_reason=finish_reason,
        finish_message=None,
    )
    return SimpleNamespace(candidates=[candidate], prompt_feedback=None)


def _image_part(data: bytes) -> SimpleNamespace:
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="image/png"), text=None)


def _text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(inline_data=None, text=text)


class _MockModels:
    """Mimics `client.aio.models` of google-genai without network access."""

    def __init__(self, owner: MockGenAIClient) -> None:
        self._owner = owner

    async def generate_content(self, *, model: str, contents: Any, config: Any = None) -> SimpleNamespace:
        owner = self._owner
        owner.calls.append(("generate_content", model))
        await asyncio.sleep(owner.latency_s)

        if model in owner.unavailable_models:
            raise _not_found(model)
        if model in owner.text_reply_models:
            return _content_response([_text_part("I can't create images of real people, but here is a description.")])

        modalities = (config or {}).get("response_modalities") if isinstance(config, dict) else None
        if modalities == ["TEXT"] or (isinstance(config, dict) and config.get("response_mime_type")):
            logger.info("MOCK GenAI: returning text response.", model=model)
            return _content_response([_text_part(_VALIDATION_JSON)])

        logger.info("MOCK GenAI: returning placeholder image.", model=model)
        return _content_response([_text_part("Here is your image."), _image_part(owner.image_bytes)])

    async def generate_images(self, *, model: str, prompt: str, config: Any = None) -> SimpleNamespace:
        owner = self._owner
        owner.calls.append(("generate_images", model))
        await asyncio.sleep(owner.latency_s)

        if model in owner.unavailable_models:
            raise _not_found(model)

        logger.info("MOCK GenAI: returning placeholder text-to-image result.", model=model)
        image = SimpleNamespace(image_bytes=owner.image_bytes, mime_type="image/png")
        return SimpleNamespace(generated_images=[SimpleNamespace(image=image, rai_filtered_reason=None)])


class MockGenAIClient:
    """
    Offline stand-in for `google.genai.Client`.

    Models listed in `unavailable_models` fail with a 404 API error and models in
    `text_reply_models` answer with text instead of an image. Every call is
    recorded in `calls` as `(method, model)`.
    """

    def __init__(
        self,
        *,
        unavailable_models: Iterable[str] = (),
        text_reply_models: Iterable[str] = (),
        color: str = "gray",
        latency_s: float = 0.0,
    ) -> None:
        self.unavailable_models = frozenset(unavailable_models)
        self.text_reply_models = frozenset(text_reply_models)
        self.latency_s = latency_s
        self.image_bytes = render_placeholder_png(color)
        self.calls: list[tuple[str, str]] = []
        self.aio = SimpleNamespace(models=_MockModels(self))
