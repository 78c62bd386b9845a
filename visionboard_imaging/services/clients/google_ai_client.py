# visionboard_imaging/services/clients/google_ai_client.py
from __future__ import annotations

import json

import structlog

# Google Gen AI SDK (Gemini API or Vertex AI backend)
from google import genai

# Service account credentials
from google.oauth2.service_account import Credentials

from visionboard_imaging.data.settings import GeminiConfig

logger = structlog.get_logger(__name__)

_CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def create_google_client(config: GeminiConfig) -> genai.Client:
    """
    Creates a google-genai client.

    With `vertexai` enabled the client authenticates with a service account against
    Vertex AI; otherwise it uses a Gemini API key.
    """
    if config.vertexai:
        return _create_vertex_client(config)

    if not config.api_key:
        raise RuntimeError("Missing Gemini API key. Set GEMINI__API_KEY.")

    client = genai.Client(api_key=config.api_key.get_secret_value())
    logger.info("GenAI client initialized (Gemini API backend).")
    return client


def _create_vertex_client(config: GeminiConfig) -> genai.Client:
    if not all([config.project_id, config.location, config.service_account_creds_json]):
        raise RuntimeError(
            "Missing Google Cloud configuration. "
            "Set GEMINI__PROJECT_ID, GEMINI__LOCATION, GEMINI__SERVICE_ACCOUNT_CREDS_JSON."
        )

    try:
        creds_info = json.loads(config.service_account_creds_json.get_secret_value())
        base_creds = Credentials.from_service_account_info(creds_info)
        scoped_creds = base_creds.with_scopes([_CLOUD_PLATFORM_SCOPE])

        client = genai.Client(
            vertexai=True,
            project=config.project_id,
            location=config.location,
            credentials=scoped_creds,
        )
    except Exception:
        logger.exception("Failed to initialize Google Gen AI client.")
        raise

    logger.info("GenAI client initialized (Vertex AI backend).", location=config.location)
    return client
