# visionboard_imaging/dto/handler_params.py
from pydantic import BaseModel, ConfigDict, Field

from visionboard_imaging.data.constants import ImageStyle
from visionboard_imaging.dto.image import ImagePayload
from visionboard_imaging.dto.synthesis import SynthesisRequest


class GenerateImageParams(BaseModel):
    """Body of a generate-image call, using the field names web clients send."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    images: list[str] = Field(default_factory=list)
    prompt: str | None = None
    embedded_text: str | None = Field(default=None, alias="embeddedText")
    title_text: str | None = Field(default=None, alias="titleText")
    style: str | None = None
    aspect_ratio: str | None = Field(default=None, alias="aspectRatio")
    identity_prompt: str | None = Field(default=None, alias="identityPrompt")
    reference_image_tags: list[str] = Field(default_factory=list, alias="referenceImageTags")

    def to_synthesis_request(self, *, is_premium: bool, default_scene: str) -> SynthesisRequest:
        """
        The first image becomes the base image and the rest are references.
        Raises ValueError for undecodable images or an unknown style.
        """
        payloads = [ImagePayload.from_string(image) for image in self.images]
        scene = (self.prompt or "").strip() or default_scene
        return SynthesisRequest(
            base_image=payloads[0] if payloads else None,
            reference_images=tuple(payloads[1:]),
            reference_tags=tuple(self.reference_image_tags),
            identity_notes=self.identity_prompt or None,
            scene_description=scene,
            title_text=self.title_text or None,
            embedded_text=self.embedded_text or None,
            style=ImageStyle.parse(self.style) if self.style else None,
            aspect_ratio=self.aspect_ratio or None,
            is_premium_caller=is_premium,
        )


class ValidateLikenessParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    reference_images: list[str] = Field(default_factory=list, alias="referenceImages")
    generated_image: str = Field(min_length=1, alias="generatedImage")
    reference_descriptions: list[str] = Field(default_factory=list, alias="referenceDescriptions")
