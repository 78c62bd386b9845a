# visionboard_imaging/services/response_normalizer.py
"""Uniform success/error envelopes returned to web callers."""
from __future__ import annotations

import datetime as dt
from typing import Any

from visionboard_imaging.dto.diagnostics import DiagnosticsReport
from visionboard_imaging.dto.synthesis import SynthesisResult
from visionboard_imaging.dto.validation import LikenessValidationOutcome
from visionboard_imaging.services.image_generation_service import SynthesisExhaustedError

DIAGNOSE_HELP = "Call GET /images/diagnose to check API key and model availability."


def success_response(data: dict[str, Any], request_id: str) -> dict[str, Any]:
    return {"success": True, "request_id": request_id, **data}


def error_response(message: str, request_id: str, *, details: dict[str, Any] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {
        "success": False,
        "error": message,
        "request_id": request_id,
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
        "help": DIAGNOSE_HELP,
    }
    if details is not None:
        body["details"] = details
    return body


def synthesis_response(result: SynthesisResult, request_id: str) -> dict[str, Any]:
    data: dict[str, Any] = {
        "image": result.image.to_data_uri(),
        "model_used": result.model_used,
        "strategy_used": result.strategy_used.value,
        "likeness_optimized": result.likeness_optimized,
    }
    if result.warning:
        data["warning"] = result.warning
    return success_response(data, request_id)


def exhaustion_response(exc: SynthesisExhaustedError, request_id: str) -> dict[str, Any]:
    return error_response(exc.message, request_id, details=dict(exc.errors))


def validation_response(outcome: LikenessValidationOutcome, request_id: str) -> dict[str, Any]:
    if outcome.skipped:
        return success_response(
            {"likeness_score": None, "skipped": True, "reason": outcome.reason},
            request_id,
        )
    data: dict[str, Any] = {
        "validation": outcome.validation.model_dump() if outcome.validation else None,
        "model_used": outcome.model_used,
    }
    if outcome.validation is None:
        data["raw_response"] = outcome.raw_response
        data["error"] = outcome.error
    return success_response(data, request_id)


def diagnostics_response(report: DiagnosticsReport, request_id: str) -> dict[str, Any]:
    return success_response({"diagnostics": report.model_dump()}, request_id)
