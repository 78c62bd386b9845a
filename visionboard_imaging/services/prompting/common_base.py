# visionboard_imaging/services/prompting/common_base.py
from __future__ import annotations

from typing import Any

from visionboard_imaging.data.constants import ImageStyle
from visionboard_imaging.dto.synthesis import PersonReference, SynthesisRequest


# Lower than the SDK default; consistency of faces matters more than variety.
LIKENESS_TEMPERATURE = 0.4
MAX_OUTPUT_TOKENS = 8192
PREMIUM_IMAGE_SIZE = "2K"

# The six axes every strategy asks the model to hold fixed.
PRESERVATION_AXES: tuple[tuple[str, str], ...] = (
    (
        "FACE & STRUCTURE",
        "exact facial features, face shape, jawline, nose, eyes and any distinctive marks",
    ),
    (
        "SKIN TONE",
        "the same skin tone and complexion, without lightening, darkening or smoothing",
    ),
    (
        "AGE",
        "the same apparent age; do NOT make anyone look younger or older",
    ),
    (
        "BODY TYPE",
        "the same build, weight and proportions; do NOT idealize or slim anyone",
    ),
    (
        "DISTINGUISHING FEATURES",
        "hairstyle, hair color and texture, glasses or other eyewear, facial hair",
    ),
    (
        "ETHNICITY",
        "the same ethnicity and gender presentation",
    ),
)

DIRECTIVE_STYLE_INSTRUCTIONS: dict[ImageStyle, str] = {
    ImageStyle.PHOTOREALISTIC: "Use photorealistic style with natural lighting and realistic textures.",
    ImageStyle.CINEMATIC: (
        "Apply cinematic style with dramatic lighting, film-like color grading, "
        "and widescreen composition."
    ),
    ImageStyle.OIL_PAINTING: "Render in oil painting style while preserving recognizable facial features.",
    ImageStyle.WATERCOLOR: "Apply soft watercolor aesthetic while maintaining facial likeness accuracy.",
    ImageStyle.CYBERPUNK: "Use cyberpunk neon aesthetic while keeping faces clearly recognizable.",
    ImageStyle.RENDER_3D: "Create 3D rendered style while preserving accurate facial proportions and features.",
}

NATURAL_STYLE_PHRASES: dict[ImageStyle, str] = {
    ImageStyle.PHOTOREALISTIC: "a natural, photorealistic look with soft real-world lighting",
    ImageStyle.CINEMATIC: "a cinematic look with dramatic lighting and film-like color grading",
    ImageStyle.OIL_PAINTING: "the look of a classic oil painting",
    ImageStyle.WATERCOLOR: "a soft watercolor look",
    ImageStyle.CYBERPUNK: "a vivid cyberpunk look full of neon light",
    ImageStyle.RENDER_3D: "the look of a polished 3D render",
}


def resolve_people(request: SynthesisRequest) -> list[PersonReference]:
    """
    One labelled person per reference image. Missing or blank tags fall back to
    "Person N"; tags beyond the number of images are ignored.
    """
    notes = request.identity_paragraphs
    people: list[PersonReference] = []
    for index in range(len(request.reference_images)):
        tag = request.reference_tags[index].strip() if index < len(request.reference_tags) else ""
        people.append(
            PersonReference(
                label=tag or f"Person {index + 1}",
                notes=notes[index] if index < len(notes) else None,
            )
        )
    return people


def unassigned_notes(request: SynthesisRequest) -> list[str]:
    """Identity paragraphs left over after pairing notes with reference images."""
    return request.identity_paragraphs[len(request.reference_images):]


def join_names(names: list[str]) -> str:
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def image_parts(request: SynthesisRequest) -> list[dict[str, Any]]:
    return [image.to_part() for image in request.all_images]


def likeness_generation_config(
    request: SynthesisRequest, *, response_modalities: list[str]
) -> dict[str, Any]:
    config: dict[str, Any] = {
        "temperature": LIKENESS_TEMPERATURE,
        "max_output_tokens": MAX_OUTPUT_TOKENS,
        "response_modalities": response_modalities,
    }
    image_config: dict[str, str] = {}
    if request.aspect_ratio:
        image_config["aspect_ratio"] = request.aspect_ratio
    if request.is_premium_caller:
        image_config["image_size"] = PREMIUM_IMAGE_SIZE
    if image_config:
        config["image_config"] = image_config
    return config
