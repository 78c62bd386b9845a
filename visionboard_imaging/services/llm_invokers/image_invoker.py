# visionboard_imaging/services/llm_invokers/image_invoker.py
from __future__ import annotations

import asyncio
import time
from typing import Any

import structlog
from google.genai import errors as genai_errors

from visionboard_imaging.data.constants import GENERATED_IMAGE_MIME, SynthesisStrategy
from visionboard_imaging.dto.image import ImagePayload
from visionboard_imaging.dto.synthesis import BuiltRequest, SynthesisAttempt, TextOnlyRequest
from visionboard_imaging.services.error_hints import describe_api_error

logger = structlog.get_logger(__name__)

_NORMAL_FINISH_REASONS = frozenset({"STOP", "FINISH_REASON_UNSPECIFIED"})
_TEXT_PREVIEW_CHARS = 100


def _enum_value(value: Any) -> str | None:
    if value is None:
        return None
    return str(getattr(value, "value", value))


def abnormal_finish_reason(response: Any) -> str | None:
    """The first candidate's finish reason, unless it finished normally."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    finish_reason = _enum_value(getattr(candidates[0], "finish_reason", None))
    if finish_reason and finish_reason not in _NORMAL_FINISH_REASONS:
        return finish_reason
    return None


async def bounded(awaitable: Any, timeout_s: float | None) -> Any:
    """Awaits a backend call, giving up after `timeout_s` seconds when set."""
    if timeout_s is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=timeout_s)


def describe_exception(exc: BaseException) -> str:
    """Human-readable message for a failed backend call."""
    if isinstance(exc, genai_errors.APIError):
        return describe_api_error(
            getattr(exc, "code", None),
            getattr(exc, "status", None),
            getattr(exc, "message", None),
            getattr(exc, "details", None),
        )
    if isinstance(exc, asyncio.TimeoutError):
        return "Request timed out"
    return str(exc) or exc.__class__.__name__


def _first_inline_image(parts: list[Any]) -> ImagePayload | None:
    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline and getattr(inline, "data", None):
            return ImagePayload(data=inline.data, mime_type=getattr(inline, "mime_type", None) or GENERATED_IMAGE_MIME)
    return None


def _collect_text(parts: list[Any]) -> str:
    return " ".join(t.strip() for t in (getattr(p, "text", None) for p in parts) if t and t.strip())


def interpret_content_response(response: Any) -> tuple[ImagePayload | None, str | None]:
    """
    Returns `(image, None)` when the response carries an inline image, otherwise
    `(None, reason)` describing why no image came back.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = _enum_value(getattr(feedback, "block_reason", None))
        if block_reason:
            return None, f"Prompt blocked: {block_reason}"
        return None, "Empty response: no candidates returned"

    candidate = candidates[0]
    parts = getattr(getattr(candidate, "content", None), "parts", None) or []
    image = _first_inline_image(parts)
    if image is not None:
        return image, None

    finish_reason = abnormal_finish_reason(response)
    if finish_reason:
        finish_message = getattr(candidate, "finish_message", None)
        suffix = f" - {finish_message}" if finish_message else ""
        return None, f"Generation stopped: {finish_reason}{suffix}"

    text = _collect_text(parts)
    if text:
        return None, f'Model returned text instead of image: "{text[:_TEXT_PREVIEW_CHARS]}..."'
    return None, "No image or text in response"


def interpret_images_response(response: Any) -> tuple[ImagePayload | None, str | None]:
    generated = getattr(response, "generated_images", None) or []
    for item in generated:
        image = getattr(item, "image", None)
        data = getattr(image, "image_bytes", None)
        if data:
            return ImagePayload(data=data, mime_type=getattr(image, "mime_type", None) or GENERATED_IMAGE_MIME), None
    for item in generated:
        reason = getattr(item, "rai_filtered_reason", None)
        if reason:
            return None, f"Image filtered: {reason}"
    return None, "No image in response"


class ImageModelInvoker:
    """
    Performs exactly one backend call per invocation and reports the outcome as a
    `SynthesisAttempt`. Never retries; failures are returned, not raised.
    """

    def __init__(self, client: Any, *, timeout_s: float | None = None) -> None:
        self._client = client
        self._timeout_s = timeout_s

    async def _bounded(self, awaitable: Any) -> Any:
        return await bounded(awaitable, self._timeout_s)

    async def invoke(self, model: str, request: BuiltRequest) -> SynthesisAttempt:
        log = logger.bind(model=model, strategy=request.strategy.value)
        started = time.monotonic()
        log.info("Trying model for likeness-preserving image generation", turns=len(request.contents))

        try:
            response = await self._bounded(
                self._client.aio.models.generate_content(
                    model=model,
                    contents=request.contents,
                    config=request.config,
                )
            )
        except Exception as e:
            message = describe_exception(e)
            log.warning("Image generation call failed", error=message, error_type=e.__class__.__name__)
            return SynthesisAttempt(model=model, strategy=request.strategy, succeeded=False, error_message=message)

        image, reason = interpret_content_response(response)
        duration_ms = int((time.monotonic() - started) * 1000)
        if image is None:
            log.warning("Model did not return an image", reason=reason, duration_ms=duration_ms)
            return SynthesisAttempt(model=model, strategy=request.strategy, succeeded=False, error_message=reason)

        log.info("Model returned an image", mime_type=image.mime_type, size=len(image.data), duration_ms=duration_ms)
        return SynthesisAttempt(model=model, strategy=request.strategy, succeeded=True, image=image)

    async def invoke_text_only(self, model: str, request: TextOnlyRequest) -> SynthesisAttempt:
        strategy = SynthesisStrategy.TEXT_ONLY_FALLBACK
        log = logger.bind(model=model, strategy=strategy.value)
        log.info("Trying text-only image generation", prompt_length=len(request.prompt))

        try:
            response = await self._bounded(
                self._client.aio.models.generate_images(
                    model=model,
                    prompt=request.prompt,
                    config=request.config,
                )
            )
        except Exception as e:
            message = describe_exception(e)
            log.warning("Text-only generation call failed", error=message, error_type=e.__class__.__name__)
            return SynthesisAttempt(model=model, strategy=strategy, succeeded=False, error_message=message)

        image, reason = interpret_images_response(response)
        if image is None:
            log.warning("Text-only model did not return an image", reason=reason)
            return SynthesisAttempt(model=model, strategy=strategy, succeeded=False, error_message=reason)

        log.info("Text-only model returned an image", size=len(image.data))
        return SynthesisAttempt(model=model, strategy=strategy, succeeded=True, image=image)
