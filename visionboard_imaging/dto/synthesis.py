# visionboard_imaging/dto/synthesis.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from visionboard_imaging.data.constants import ImageStyle, SynthesisStrategy
from visionboard_imaging.dto.image import ImagePayload


class SynthesisRequest(BaseModel):
    """Everything the caller supplies for one synthesis call."""
    model_config = ConfigDict(frozen=True)

    base_image: ImagePayload | None = None
    reference_images: tuple[ImagePayload, ...] = ()
    reference_tags: tuple[str, ...] = ()
    identity_notes: str | None = None
    scene_description: str = Field(min_length=1)
    title_text: str | None = None
    embedded_text: str | None = None
    style: ImageStyle | None = None
    aspect_ratio: str | None = None
    is_premium_caller: bool = False

    @property
    def has_images(self) -> bool:
        return self.base_image is not None or bool(self.reference_images)

    @property
    def all_images(self) -> list[ImagePayload]:
        """Base image first, then the references in order."""
        images = [self.base_image] if self.base_image is not None else []
        images.extend(self.reference_images)
        return images

    @property
    def identity_paragraphs(self) -> list[str]:
        if not self.identity_notes:
            return []
        return [p.strip() for p in self.identity_notes.split("\n\n") if p.strip()]


class PersonReference(BaseModel):
    """A labelled person derived from one reference image."""
    model_config = ConfigDict(frozen=True)

    label: str
    notes: str | None = None


class BuiltRequest(BaseModel):
    """A backend-agnostic `generate_content` request body for one strategy."""
    model_config = ConfigDict(frozen=True)

    strategy: SynthesisStrategy
    contents: list[dict[str, Any]]
    config: dict[str, Any]


class TextOnlyRequest(BaseModel):
    """The last-resort prompt for a text-to-image model; no images attached."""
    model_config = ConfigDict(frozen=True)

    prompt: str
    config: dict[str, Any]


class SynthesisAttempt(BaseModel):
    model: str
    strategy: SynthesisStrategy
    succeeded: bool
    image: ImagePayload | None = None
    error_message: str | None = None


class SynthesisResult(BaseModel):
    image: ImagePayload
    model_used: str
    strategy_used: SynthesisStrategy
    likeness_optimized: bool
    warning: str | None = None
    attempts: list[SynthesisAttempt] = Field(default_factory=list)
