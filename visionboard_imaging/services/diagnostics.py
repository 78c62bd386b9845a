# visionboard_imaging/services/diagnostics.py
from __future__ import annotations

from typing import Any

import structlog
from google.genai import errors as genai_errors

from visionboard_imaging.data.settings import ImageModelsConfig
from visionboard_imaging.dto.diagnostics import DiagnosticsReport, DiagnosticsSummary, ModelCheck
from visionboard_imaging.services.error_hints import API_KEY_URL
from visionboard_imaging.services.llm_invokers.image_invoker import bounded, describe_exception

logger = structlog.get_logger(__name__)

_IMAGE_KINDS = frozenset({"gemini_image", "text_to_image"})


class ModelDiagnostics:
    """Checks which configured models the current credentials can reach."""

    def __init__(self, client: Any, models: ImageModelsConfig, *, backend: str, api_key_configured: bool) -> None:
        self._client = client
        self._models = models
        self._backend = backend
        self._api_key_configured = api_key_configured

    def _models_to_check(self) -> list[tuple[str, str]]:
        checks = [(self._models.validator, "chat")]
        checks.extend((model, "gemini_image") for model in self._models.fallback_chain)
        checks.append((self._models.last_resort, "text_to_image"))
        return checks

    async def _check_model(self, model: str, kind: str) -> ModelCheck:
        try:
            if kind == "text_to_image":
                call = self._client.aio.models.generate_images(
                    model=model, prompt="test", config={"number_of_images": 1}
                )
            else:
                call = self._client.aio.models.generate_content(
                    model=model,
                    contents=[{"role": "user", "parts": [{"text": 'Say "OK" if you can hear me.'}]}],
                    config={"max_output_tokens": 50, "response_modalities": ["TEXT"]},
                )
            await bounded(call, self._models.attempt_timeout_s)
        except genai_errors.APIError as e:
            return ModelCheck(available=False, status=e.code or 0, kind=kind, error=describe_exception(e))
        except Exception as e:
            return ModelCheck(available=False, status=0, kind=kind, error=describe_exception(e))
        return ModelCheck(available=True, status=200, kind=kind)

    async def run(self) -> DiagnosticsReport:
        log = logger.bind(backend=self._backend)
        log.info("Running model diagnostics")

        results: dict[str, ModelCheck] = {}
        for model, kind in self._models_to_check():
            results[model] = await self._check_model(model, kind)
            log.info("Model checked", model=model, kind=kind, available=results[model].available)

        available = [name for name, check in results.items() if check.available]
        image_models = [name for name, check in results.items() if check.available and check.kind in _IMAGE_KINDS]
        summary = DiagnosticsSummary(
            total_models=len(results),
            available_models=len(available),
            available=available,
            can_generate_images=bool(image_models),
            available_image_models=image_models,
        )

        if not available:
            recommendation = (
                "No models are accessible. Please verify your Gemini API key is valid and has not "
                f"expired. Get a new key at {API_KEY_URL}"
            )
        elif not image_models:
            configured = ", ".join([*self._models.fallback_chain, self._models.last_resort])
            recommendation = (
                "No image generation models are accessible. Please ensure your API key has access "
                f"to one of: {configured}. Visit {API_KEY_URL} to check your key permissions."
            )
        else:
            recommendation = f"Image generation is available using: {', '.join(image_models)}"

        log.info("Diagnostics complete", available=available, can_generate_images=summary.can_generate_images)
        return DiagnosticsReport(
            backend=self._backend,
            api_key_configured=self._api_key_configured,
            models=results,
            summary=summary,
            recommendation=recommendation,
        )
