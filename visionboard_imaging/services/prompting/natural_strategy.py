# visionboard_imaging/services/prompting/natural_strategy.py
from __future__ import annotations

from visionboard_imaging.data.constants import SynthesisStrategy
from visionboard_imaging.dto.synthesis import BuiltRequest, SynthesisRequest

from .base_strategy import PromptStrategy
from .common_base import (
    NATURAL_STYLE_PHRASES,
    image_parts,
    join_names,
    likeness_generation_config,
    resolve_people,
    unassigned_notes,
)


class NaturalLanguageStrategy(PromptStrategy):
    """
    A single conversational request, closer to how image models are usually prompted.
    Used when a model rejects the instructional identity-lock exchange.
    """

    strategy = SynthesisStrategy.SINGLE_TURN_NATURAL

    def build(self, request: SynthesisRequest) -> BuiltRequest:
        return BuiltRequest(
            strategy=self.strategy,
            contents=[
                {
                    "role": "user",
                    "parts": [*image_parts(request), {"text": self.compose_text(request)}],
                }
            ],
            config=likeness_generation_config(request, response_modalities=["IMAGE"]),
        )

    @staticmethod
    def compose_text(request: SynthesisRequest) -> str:
        people = resolve_people(request)
        subject = join_names([person.label for person in people]) or "these people"
        scene = request.scene_description.rstrip().rstrip(".")

        sentences = [
            f"Use the attached photos of {subject} and generate an image of them {scene}.",
            "Make sure their faces, skin tone, age and build match the photos exactly, "
            "so that anyone who knows them would recognize them straight away.",
        ]

        for person in people:
            if person.notes:
                sentences.append(f"For reference, {person.label} looks like this: {person.notes}")
        for note in unassigned_notes(request):
            sentences.append(f"For reference: {note}")

        if request.title_text and request.embedded_text:
            sentences.append(
                f'Please write the title "{request.title_text}" somewhere clear in the image in '
                f'elegant, readable lettering, and work the words "{request.embedded_text}" '
                "naturally into the scene."
            )
        elif request.title_text:
            sentences.append(
                f'Please write the title "{request.title_text}" somewhere clear in the image in '
                "elegant, readable lettering."
            )
        elif request.embedded_text:
            sentences.append(f'Please work the words "{request.embedded_text}" naturally into the scene.')

        if request.style is not None:
            sentences.append(
                f"Give it {NATURAL_STYLE_PHRASES[request.style]}, while keeping everyone "
                "clearly recognizable."
            )

        if request.is_premium_caller:
            sentences.append(
                "Make it look like a high-end, professionally lit photograph with rich, sharp detail."
            )

        return " ".join(sentences)
