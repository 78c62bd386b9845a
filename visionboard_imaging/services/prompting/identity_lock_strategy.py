# visionboard_imaging/services/prompting/identity_lock_strategy.py
from __future__ import annotations

from typing import Any

from visionboard_imaging.data.constants import SynthesisStrategy
from visionboard_imaging.dto.synthesis import BuiltRequest, PersonReference, SynthesisRequest

from .base_strategy import PromptStrategy
from .common_base import (
    DIRECTIVE_STYLE_INSTRUCTIONS,
    PRESERVATION_AXES,
    image_parts,
    join_names,
    likeness_generation_config,
    resolve_people,
    unassigned_notes,
)

_PREMIUM_BLOCK = """PREMIUM QUALITY
- Render at the highest quality available (8K-equivalent detail)
- Ultra-detailed textures and materials
- Professional photography lighting
- Cinematic composition and depth of field"""


class IdentityLockStrategy(PromptStrategy):
    """
    Three-turn exchange: the user shares the photos and locks the identities, a
    fabricated model turn confirms the lock, and only then does the user describe
    the scene.
    """

    strategy = SynthesisStrategy.MULTI_TURN_IDENTITY_LOCK

    def build(self, request: SynthesisRequest) -> BuiltRequest:
        people = resolve_people(request)
        contents: list[dict[str, Any]] = [
            {
                "role": "user",
                "parts": [*image_parts(request), {"text": self._identity_lock_text(request, people)}],
            },
            {"role": "model", "parts": [{"text": self._acknowledgment_text(people)}]},
            {"role": "user", "parts": [{"text": self._scene_text(request)}]},
        ]
        return BuiltRequest(
            strategy=self.strategy,
            contents=contents,
            config=likeness_generation_config(request, response_modalities=["IMAGE", "TEXT"]),
        )

    @staticmethod
    def _identity_lock_text(request: SynthesisRequest, people: list[PersonReference]) -> str:
        lines = [
            "IDENTITY LOCK: The attached photo(s) show the exact people who must appear "
            "in the image I am about to request. They are real people and must stay "
            "recognizable as themselves."
        ]
        if request.base_image is not None:
            lines.append(
                "The FIRST attached image is the primary reference photo. Treat it as the "
                "anchor for likeness: the people in it must appear with their exact likeness preserved."
            )

        if people:
            lines.append("")
            lines.append("PEOPLE TO PRESERVE:")
            for person in people:
                if person.notes:
                    lines.append(f'- "{person.label}": {person.notes}')
                else:
                    lines.append(f'- "{person.label}" (see their reference photo)')

        extra_notes = unassigned_notes(request)
        if extra_notes:
            lines.append("")
            lines.append("ADDITIONAL PHYSICAL DESCRIPTION:")
            lines.extend(f"- {note}" for note in extra_notes)

        lines.append("")
        lines.append("NON-NEGOTIABLE PRESERVATION REQUIREMENTS:")
        for number, (axis, detail) in enumerate(PRESERVATION_AXES, start=1):
            lines.append(f"{number}. {axis}: {detail}")
        lines.append("")
        lines.append(
            "These requirements override everything else. If any of them conflicts with "
            "the scene I describe, adapt the scene, never the people."
        )
        lines.append("Please confirm that you have locked in these identities before I describe the scene.")
        return "\n".join(lines)

    @staticmethod
    def _acknowledgment_text(people: list[PersonReference]) -> str:
        subject = join_names([person.label for person in people]) or "the person(s) shown"
        axes = "; ".join(axis.lower() for axis, _ in PRESERVATION_AXES)
        return (
            f"Understood. I have locked in the identities of {subject}. "
            f"I will preserve exactly: {axes}. "
            "These will not change regardless of the scene; if the scene conflicts with "
            "them, I will adapt the scene instead. What scene would you like me to generate?"
        )

    @staticmethod
    def _scene_text(request: SynthesisRequest) -> str:
        blocks = [
            "Now generate an image of the locked-in people in the following scene:\n\n"
            f"{request.scene_description}",
            "REMINDER: their identity is non-negotiable. Keep their faces, skin tone, age, "
            "body type, distinguishing features and ethnicity exactly as in the reference "
            "photos. Do NOT substitute generic models or idealized versions of them. Adjust "
            "clothing, pose and lighting to fit the scene, not the people themselves.",
        ]

        if request.title_text or request.embedded_text:
            text_lines = ["TEXT RENDERING"]
            if request.title_text:
                text_lines.append(
                    f'- Include the title "{request.title_text}" prominently, in elegant, readable '
                    "typography placed where it does not cover anyone's face"
                )
            if request.embedded_text:
                text_lines.append(f'- Also include this text naturally in the scene: "{request.embedded_text}"')
            blocks.append("\n".join(text_lines))

        if request.style is not None:
            blocks.append(
                "ARTISTIC STYLE\n"
                f"{DIRECTIVE_STYLE_INSTRUCTIONS[request.style]}\n"
                "Style may change the aesthetic, but must NOT change who the people are."
            )

        if request.is_premium_caller:
            blocks.append(_PREMIUM_BLOCK)

        return "\n\n".join(blocks)
