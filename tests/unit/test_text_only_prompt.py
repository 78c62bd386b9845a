"""Tests for the last-resort text-to-image prompt."""

from __future__ import annotations

from visionboard_imaging.data.constants import ImageStyle
from visionboard_imaging.dto.synthesis import SynthesisRequest
from visionboard_imaging.services.prompting import build_text_only_request
from visionboard_imaging.services.prompting.text_only import NEGATIVE_CLAUSE


class TestBuildTextOnlyRequest:
    def test_scene_only_prompt(self, scene_only_request: SynthesisRequest):
        built = build_text_only_request(scene_only_request)
        assert built.prompt == f"a cosy reading nook by a rainy window. {NEGATIVE_CLAUSE}"

    def test_identity_notes_become_character_description(self, family_request: SynthesisRequest):
        built = build_text_only_request(family_request)
        assert built.prompt.startswith(
            "Create an image featuring people with these characteristics: "
            "Curly grey hair, round glasses. Tall, short beard, broad shoulders. "
            "Scene: hiking together on a mountain trail at sunrise."
        )

    def test_no_reference_images_are_sent(self, family_request: SynthesisRequest):
        built = build_text_only_request(family_request)
        assert set(built.model_dump()) == {"prompt", "config"}
        assert "Mom" not in built.prompt

    def test_optional_additions_in_order(self, scene_only_request: SynthesisRequest):
        request = scene_only_request.model_copy(
            update={
                "title_text": "Read More",
                "embedded_text": "2027",
                "style": ImageStyle.WATERCOLOR,
                "is_premium_caller": True,
            }
        )
        prompt = build_text_only_request(request).prompt
        title = prompt.index('Include the title text "Read More" prominently.')
        embedded = prompt.index('Include the text "2027" in the scene.')
        style = prompt.index("Style: a soft watercolor look.")
        premium = prompt.index("High resolution")
        negative = prompt.index(NEGATIVE_CLAUSE)
        assert title < embedded < style < premium < negative

    def test_scene_punctuation_not_doubled(self):
        request = SynthesisRequest(scene_description="A lighthouse at dusk!")
        assert build_text_only_request(request).prompt.startswith("A lighthouse at dusk! Avoid:")

    def test_config_defaults(self, scene_only_request: SynthesisRequest):
        assert build_text_only_request(scene_only_request).config == {
            "number_of_images": 1,
            "aspect_ratio": "4:3",
            "safety_filter_level": "BLOCK_ONLY_HIGH",
            "person_generation": "ALLOW_ADULT",
        }

    def test_requested_aspect_ratio_wins(self, scene_only_request: SynthesisRequest):
        request = scene_only_request.model_copy(update={"aspect_ratio": "9:16"})
        assert build_text_only_request(request).config["aspect_ratio"] == "9:16"
