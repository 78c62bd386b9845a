# visionboard_imaging/dto/diagnostics.py
from pydantic import BaseModel


class ModelCheck(BaseModel):
    available: bool
    status: int
    kind: str
    error: str | None = None


class DiagnosticsSummary(BaseModel):
    total_models: int
    available_models: int
    available: list[str]
    can_generate_images: bool
    available_image_models: list[str]


class DiagnosticsReport(BaseModel):
    backend: str
    api_key_configured: bool
    models: dict[str, ModelCheck]
    summary: DiagnosticsSummary
    recommendation: str
