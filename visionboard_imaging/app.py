# visionboard_imaging/app.py
from typing import Any

from aiohttp import web

from visionboard_imaging.data.settings import Settings, settings
from visionboard_imaging.services import ImageSynthesisOrchestrator, ModelDiagnostics
from visionboard_imaging.services.clients import describe_backend, get_ai_client
from visionboard_imaging.services.llm_invokers import LikenessValidator
from visionboard_imaging.utils.logging import setup_logger
from visionboard_imaging.web_handlers.image_routes import (
    diagnostics_key,
    orchestrator_key,
    routes as image_routes,
    settings_key,
    validator_key,
)


def create_app(app_settings: Settings | None = None, *, client: Any = None) -> web.Application:
    """
    Wires the backend client, orchestrator, validator and diagnostics into an
    aiohttp application. Pass `client` to run against a fake backend.
    """
    app_settings = app_settings or settings
    client = client if client is not None else get_ai_client(app_settings)
    models = app_settings.image_models

    app = web.Application()
    app[settings_key] = app_settings
    app[orchestrator_key] = ImageSynthesisOrchestrator(client, models)
    app[validator_key] = LikenessValidator(client, models.validator, timeout_s=models.attempt_timeout_s)
    app[diagnostics_key] = ModelDiagnostics(
        client,
        models,
        backend=describe_backend(app_settings),
        api_key_configured=bool(app_settings.gemini.api_key or app_settings.gemini.service_account_creds_json),
    )
    app.add_routes(image_routes)
    return app


def main() -> None:
    logger = setup_logger()
    app = create_app()
    logger.info(
        "Starting image synthesis server",
        host=settings.server.listening_host,
        port=settings.server.listening_port,
        fallback_chain=list(settings.image_models.fallback_chain),
        last_resort=settings.image_models.last_resort,
    )
    web.run_app(
        app,
        host=settings.server.listening_host,
        port=settings.server.listening_port,
        print=None,
    )


if __name__ == "__main__":
    main()
