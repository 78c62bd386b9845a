"""Shared pytest fixtures for visionboard_imaging tests."""

import pytest

from visionboard_imaging.data.settings import GeminiConfig, ImageModelsConfig, Settings
from visionboard_imaging.dto.image import ImagePayload
from visionboard_imaging.dto.synthesis import SynthesisRequest

from tests.fakes import JPEG_BYTES


@pytest.fixture
def models_config() -> ImageModelsConfig:
    """Short, recognisable model names so assertions read clearly."""
    return ImageModelsConfig(
        primary="model-primary",
        reliable="model-reliable",
        secondary="model-secondary",
        last_resort="model-text-only",
        validator="model-validator",
        attempt_timeout_s=5.0,
    )


@pytest.fixture
def test_settings(models_config: ImageModelsConfig) -> Settings:
    return Settings(gemini=GeminiConfig(client="mock"), image_models=models_config)


@pytest.fixture
def reference_photo() -> ImagePayload:
    return ImagePayload(data=JPEG_BYTES, mime_type="image/jpeg")


@pytest.fixture
def family_request(reference_photo: ImagePayload) -> SynthesisRequest:
    """A base photo plus two tagged references, with identity notes for both."""
    return SynthesisRequest(
        base_image=reference_photo,
        reference_images=(
            ImagePayload(data=b"ref-mom", mime_type="image/png"),
            ImagePayload(data=b"ref-dad", mime_type="image/png"),
        ),
        reference_tags=("Mom", "Dad"),
        identity_notes="Curly grey hair, round glasses.\n\nTall, short beard, broad shoulders.",
        scene_description="hiking together on a mountain trail at sunrise",
    )


@pytest.fixture
def scene_only_request() -> SynthesisRequest:
    return SynthesisRequest(scene_description="a cosy reading nook by a rainy window")
