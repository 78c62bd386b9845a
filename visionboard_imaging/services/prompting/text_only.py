# visionboard_imaging/services/prompting/text_only.py
from __future__ import annotations

from typing import Any

from visionboard_imaging.dto.synthesis import SynthesisRequest, TextOnlyRequest

from .common_base import NATURAL_STYLE_PHRASES

NEGATIVE_CLAUSE = (
    "Avoid: blurry, distorted, deformed faces, extra limbs, low quality, "
    "cartoonish or unrealistic results."
)
DEFAULT_ASPECT_RATIO = "4:3"


def build_text_only_request(request: SynthesisRequest) -> TextOnlyRequest:
    """
    Builds the last-resort prompt for a text-to-image model. No photos can be
    attached, so the identity notes are folded in as a written character description.
    """
    scene = request.scene_description
    if request.identity_paragraphs:
        characters = " ".join(p.rstrip(".") + "." for p in request.identity_paragraphs).rstrip(".")
        prompt = f"Create an image featuring people with these characteristics: {characters}. Scene: {scene}"
    else:
        prompt = scene
    prompt = prompt.rstrip()
    if not prompt.endswith((".", "!", "?")):
        prompt += "."

    additions: list[str] = []
    if request.title_text:
        additions.append(f'Include the title text "{request.title_text}" prominently.')
    if request.embedded_text:
        additions.append(f'Include the text "{request.embedded_text}" in the scene.')
    if request.style is not None:
        additions.append(f"Style: {NATURAL_STYLE_PHRASES[request.style]}.")
    if request.is_premium_caller:
        additions.append("High resolution, ultra-detailed, professional quality.")
    additions.append(NEGATIVE_CLAUSE)

    config: dict[str, Any] = {
        "number_of_images": 1,
        "aspect_ratio": request.aspect_ratio or DEFAULT_ASPECT_RATIO,
        "safety_filter_level": "BLOCK_ONLY_HIGH",
        "person_generation": "ALLOW_ADULT",
    }
    return TextOnlyRequest(prompt=" ".join([prompt, *additions]), config=config)
