# visionboard_imaging/services/__init__.py
from .diagnostics import ModelDiagnostics
from .image_generation_service import (
    ImageSynthesisOrchestrator,
    SynthesisExhaustedError,
)

__all__ = [
    "ImageSynthesisOrchestrator",
    "ModelDiagnostics",
    "SynthesisExhaustedError",
]
