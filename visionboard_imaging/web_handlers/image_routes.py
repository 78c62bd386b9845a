# visionboard_imaging/web_handlers/image_routes.py
import functools
import uuid
from typing import Any

import structlog
from aiohttp import web
from pydantic import ValidationError

from visionboard_imaging.data.settings import Settings
from visionboard_imaging.dto.handler_params import GenerateImageParams, ValidateLikenessParams
from visionboard_imaging.dto.image import ImagePayload
from visionboard_imaging.services import ImageSynthesisOrchestrator, ModelDiagnostics, SynthesisExhaustedError
from visionboard_imaging.services import response_normalizer
from visionboard_imaging.services.llm_invokers import LikenessValidationError, LikenessValidator
from visionboard_imaging.utils.serialization import orjson_dumps

logger = structlog.get_logger(__name__)

SUBSCRIPTION_TIER_HEADER = "X-Subscription-Tier"

settings_key = web.AppKey("settings", Settings)
orchestrator_key = web.AppKey("orchestrator", ImageSynthesisOrchestrator)
validator_key = web.AppKey("validator", LikenessValidator)
diagnostics_key = web.AppKey("diagnostics", ModelDiagnostics)

_json_response = functools.partial(web.json_response, dumps=orjson_dumps)


def _new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def is_premium_request(req: web.Request) -> bool:
    """The upstream identity provider forwards the caller's subscription tier."""
    tier = req.headers.get(SUBSCRIPTION_TIER_HEADER, "").strip().upper()
    premium_tiers = {t.upper() for t in req.app[settings_key].premium_tiers}
    return tier in premium_tiers


async def _read_json(req: web.Request) -> dict[str, Any]:
    body = await req.json()
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object.")
    return body


def _bad_request(message: str, request_id: str) -> web.Response:
    return _json_response(response_normalizer.error_response(message, request_id), status=400)


async def generate_image(req: web.Request) -> web.Response:
    request_id = _new_request_id()
    log = logger.bind(request_id=request_id)
    app_settings = req.app[settings_key]

    try:
        params = GenerateImageParams.model_validate(await _read_json(req))
        synthesis_request = params.to_synthesis_request(
            is_premium=is_premium_request(req),
            default_scene=app_settings.default_scene,
        )
    except ValidationError as e:
        log.warning("Invalid generate-image request", errors=e.errors(include_input=False))
        return _bad_request(f"Invalid request: {e.error_count()} validation error(s)", request_id)
    except ValueError as e:
        log.warning("Invalid generate-image request", error=str(e))
        return _bad_request(str(e), request_id)

    with structlog.contextvars.bound_contextvars(request_id=request_id):
        try:
            result = await req.app[orchestrator_key].synthesize(synthesis_request)
        except SynthesisExhaustedError as e:
            return _json_response(response_normalizer.exhaustion_response(e, request_id))

    return _json_response(response_normalizer.synthesis_response(result, request_id))


async def validate_likeness(req: web.Request) -> web.Response:
    request_id = _new_request_id()
    log = logger.bind(request_id=request_id)

    try:
        params = ValidateLikenessParams.model_validate(await _read_json(req))
        references = [ImagePayload.from_string(image) for image in params.reference_images]
        generated = ImagePayload.from_string(params.generated_image)
    except ValidationError as e:
        log.warning("Invalid validate-likeness request", errors=e.errors(include_input=False))
        return _bad_request("Missing or invalid generatedImage parameter", request_id)
    except ValueError as e:
        log.warning("Invalid validate-likeness request", error=str(e))
        return _bad_request(str(e), request_id)

    with structlog.contextvars.bound_contextvars(request_id=request_id):
        try:
            outcome = await req.app[validator_key].validate(
                references, generated, params.reference_descriptions
            )
        except LikenessValidationError as e:
            return _json_response(response_normalizer.error_response(str(e), request_id))

    return _json_response(response_normalizer.validation_response(outcome, request_id))


async def diagnose(req: web.Request) -> web.Response:
    request_id = _new_request_id()
    with structlog.contextvars.bound_contextvars(request_id=request_id):
        report = await req.app[diagnostics_key].run()
    return _json_response(response_normalizer.diagnostics_response(report, request_id))


routes = [
    web.post("/images/generate", generate_image),
    web.post("/images/validate-likeness", validate_likeness),
    web.get("/images/diagnose", diagnose),
]
