# File: visionboard_imaging/services/llm_invokers/likeness_validator.py
from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from visionboard_imaging.dto.image import ImagePayload
from visionboard_imaging.dto.validation import LikenessValidationOutcome, LikenessVerdict
from visionboard_imaging.services.llm_invokers.image_invoker import (
    abnormal_finish_reason,
    bounded,
    describe_exception,
)

logger = structlog.get_logger(__name__)


class LikenessValidationError(Exception):
    """The validator model could not be reached or refused the request."""


class LikenessValidator:
    """
    Asks a vision model to compare a generated image with the reference photos and
    return a structured verdict. This is a QA pass run after synthesis; it never
    affects which image was produced.
    """
    _RUBRIC = """You are an expert at comparing faces and body types in images.

Compare the person(s) in the Reference Images with the person(s) in the Generated Vision Board Image.

Evaluate the following aspects:

1. FACE MATCHING
   - Are the facial features recognizable as the same person(s)?
   - Is the face shape preserved?
   - Are distinctive features (nose shape, eye shape, jawline) maintained?

2. SKIN TONE & COMPLEXION
   - Is the skin tone accurate?
   - Is the complexion similar?

3. AGE APPEARANCE
   - Does the person appear the same age?
   - Were they made to look younger/older inappropriately?

4. BODY TYPE
   - Is the general body shape preserved (slim, average, heavy)?
   - Is the height proportion reasonable?
   - Were they idealized or changed significantly?

5. DISTINCTIVE FEATURES
   - Are glasses preserved (if present)?
   - Is facial hair preserved (if present)?
   - Are other identifying features maintained?

Respond ONLY with valid JSON in this exact format:
{
  "likeness_score": <number 0.0 to 1.0>,
  "face_match": <boolean>,
  "skin_tone_match": <boolean>,
  "age_match": <boolean>,
  "body_type_match": <boolean>,
  "overall_recognizable": <boolean>,
  "explanation": "<2-3 sentence summary of comparison>",
  "issues": ["<list any specific issues found>"],
  "suggestions": ["<list improvement suggestions for regeneration>"]
}"""
    _TEMPERATURE = 0.2
    _MAX_OUTPUT_TOKENS = 1024
    # Thinking tokens count against the output cap and can crowd out the JSON.
    _THINKING_BUDGET = 0
    _RAW_PREVIEW_CHARS = 500

    def __init__(self, client: Any, model: str, *, timeout_s: float | None = None) -> None:
        self._client = client
        self.model = model
        self._timeout_s = timeout_s

    def build_contents(
        self,
        reference_images: Sequence[ImagePayload],
        generated_image: ImagePayload,
        reference_descriptions: Sequence[str] = (),
    ) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = []
        for index, image in enumerate(reference_images):
            description = (
                reference_descriptions[index]
                if index < len(reference_descriptions) and reference_descriptions[index]
                else f"Reference person {index + 1}"
            )
            parts.append(image.to_part())
            parts.append({"text": f"Reference Image {index + 1}: {description}"})

        parts.append(generated_image.to_part())
        parts.append({"text": "Generated Vision Board Image (to evaluate)"})
        parts.append({"text": self._RUBRIC})
        return [{"role": "user", "parts": parts}]

    def generation_config(self) -> dict[str, Any]:
        return {
            "temperature": self._TEMPERATURE,
            "max_output_tokens": self._MAX_OUTPUT_TOKENS,
            "response_mime_type": "application/json",
            "thinking_config": {"thinking_budget": self._THINKING_BUDGET},
        }

    async def validate(
        self,
        reference_images: Sequence[ImagePayload],
        generated_image: ImagePayload,
        reference_descriptions: Sequence[str] = (),
    ) -> LikenessValidationOutcome:
        """
        Compares the generated image with the references.

        Returns a skipped outcome when there is nothing to compare against, and an
        outcome with `validation=None` when the model's answer cannot be parsed.
        Raises LikenessValidationError when the model call itself fails.
        """
        if not reference_images:
            return LikenessValidationOutcome(
                skipped=True,
                likeness_score=None,
                reason="No reference images provided for comparison",
            )

        log = logger.bind(model=self.model, reference_images=len(reference_images))
        log.info("Running likeness validation")
        started = time.monotonic()

        try:
            response = await bounded(
                self._client.aio.models.generate_content(
                    model=self.model,
                    contents=self.build_contents(reference_images, generated_image, reference_descriptions),
                    config=self.generation_config(),
                ),
                self._timeout_s,
            )
        except Exception as e:
            message = describe_exception(e)
            log.error("Likeness validation call failed", error=message)
            raise LikenessValidationError(f"Validation failed: {message}") from e

        raw_text = _response_text(response)
        finish_reason = abnormal_finish_reason(response)
        duration_ms = int((time.monotonic() - started) * 1000)

        try:
            verdict = LikenessVerdict.model_validate_json(_strip_code_fence(raw_text) or "{}")
        except ValidationError as e:
            log.error(
                "Failed to parse validation response",
                error=str(e),
                finish_reason=finish_reason,
                raw=raw_text[:200],
                duration_ms=duration_ms,
            )
            error = "Failed to parse validation response"
            if finish_reason:
                error += f" (generation stopped: {finish_reason})"
            return LikenessValidationOutcome(
                validation=None,
                model_used=self.model,
                raw_response=raw_text[: self._RAW_PREVIEW_CHARS],
                error=error,
            )

        log.info(
            "Likeness validation complete",
            score=verdict.likeness_score,
            recognizable=verdict.overall_recognizable,
            duration_ms=duration_ms,
        )
        return LikenessValidationOutcome(
            validation=verdict,
            model_used=self.model,
            likeness_score=verdict.likeness_score,
        )


def _response_text(response: Any) -> str:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    parts = getattr(getattr(candidates[0], "content", None), "parts", None) or []
    return "".join(getattr(p, "text", None) or "" for p in parts).strip()


def _strip_code_fence(text: str) -> str:
    """Removes a surrounding ```json fence some models add despite the JSON MIME type."""
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()
