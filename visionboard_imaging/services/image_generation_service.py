# visionboard_imaging/services/image_generation_service.py
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from visionboard_imaging.data.constants import SynthesisStrategy
from visionboard_imaging.data.settings import ImageModelsConfig
from visionboard_imaging.dto.synthesis import (
    BuiltRequest,
    SynthesisAttempt,
    SynthesisRequest,
    SynthesisResult,
)
from visionboard_imaging.services.error_hints import build_exhaustion_message
from visionboard_imaging.services.llm_invokers.image_invoker import ImageModelInvoker
from visionboard_imaging.services.prompting import build_text_only_request, get_ordered_strategies

logger = structlog.get_logger(__name__)

LAST_RESORT_WARNING = (
    "Generated with the text-only fallback model - reference photos were not used, "
    "so likeness may not be preserved."
)
NO_IMAGES_SKIP_REASON = "Skipped: no reference images were supplied"


class SynthesisExhaustedError(Exception):
    """Every model and strategy, including the text-only fallback, failed."""

    def __init__(self, message: str, errors: dict[str, str], attempts: list[SynthesisAttempt]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.attempts = attempts


class ImageSynthesisOrchestrator:
    """
    Sequential fallback over a fixed, ordered list of image models.

    Each model gets the multi-turn identity-lock request and then the single-turn
    request; the first image returned anywhere ends the call. If every model fails,
    a text-only model renders the scene without the reference photos.
    """

    def __init__(
        self,
        client: Any,
        models: ImageModelsConfig,
        *,
        invoker: ImageModelInvoker | None = None,
    ) -> None:
        self._fallback_chain: Sequence[str] = models.fallback_chain
        self._last_resort_model = models.last_resort
        self._invoker = invoker or ImageModelInvoker(client, timeout_s=models.attempt_timeout_s)

    @property
    def fallback_chain(self) -> Sequence[str]:
        return self._fallback_chain

    @property
    def last_resort_model(self) -> str:
        return self._last_resort_model

    async def synthesize(self, request: SynthesisRequest) -> SynthesisResult:
        log = logger.bind(
            base_image=request.base_image is not None,
            reference_images=len(request.reference_images),
            reference_tags=len(request.reference_tags),
            has_identity_notes=bool(request.identity_notes),
            style=request.style.value if request.style else "default",
            premium=request.is_premium_caller,
        )
        log.info("Image synthesis requested")

        attempts: list[SynthesisAttempt] = []
        errors: dict[str, str] = {}

        if request.has_images:
            built = [strategy.build(request) for strategy in get_ordered_strategies()]
            for model in self._fallback_chain:
                result = await self._try_model(model, built, attempts, errors)
                if result is not None:
                    return result
        else:
            log.info("No images supplied; only the text-only fallback can run")
            for model in self._fallback_chain:
                errors[model] = NO_IMAGES_SKIP_REASON

        text_request = build_text_only_request(request)
        attempt = await self._invoker.invoke_text_only(self._last_resort_model, text_request)
        attempts.append(attempt)
        if attempt.succeeded and attempt.image is not None:
            log.warning("Text-only fallback succeeded; likeness not preserved", model=self._last_resort_model)
            return SynthesisResult(
                image=attempt.image,
                model_used=self._last_resort_model,
                strategy_used=SynthesisStrategy.TEXT_ONLY_FALLBACK,
                likeness_optimized=False,
                warning=LAST_RESORT_WARNING,
                attempts=attempts,
            )
        last_resort_key = self._last_resort_model
        if last_resort_key in errors:
            last_resort_key = f"{last_resort_key} ({SynthesisStrategy.TEXT_ONLY_FALLBACK.value})"
        errors[last_resort_key] = attempt.error_message or "Unknown error"

        message = build_exhaustion_message(errors)
        log.error("All image generation methods failed", errors=errors)
        raise SynthesisExhaustedError(message, errors, attempts)

    async def _try_model(
        self,
        model: str,
        built: list[BuiltRequest],
        attempts: list[SynthesisAttempt],
        errors: dict[str, str],
    ) -> SynthesisResult | None:
        failures: list[str] = []
        for request in built:
            attempt = await self._invoker.invoke(model, request)
            attempts.append(attempt)
            if attempt.succeeded and attempt.image is not None:
                logger.info("Likeness-preserving generation succeeded", model=model, strategy=request.strategy.value)
                return SynthesisResult(
                    image=attempt.image,
                    model_used=model,
                    strategy_used=request.strategy,
                    likeness_optimized=True,
                    attempts=attempts,
                )
            failures.append(f"{request.strategy.value}: {attempt.error_message or 'Unknown error'}")

        errors[model] = " | ".join(failures)
        logger.warning("Model failed with every strategy", model=model, error=errors[model])
        return None
