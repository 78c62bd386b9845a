"""Tests for visionboard_imaging.services.prompting: request builders.

Tests cover:
- The three-turn identity-lock exchange and its fabricated model turn.
- The single-turn natural-language request.
- Person labelling from tags, including short tag lists.
- Generation config: modalities, aspect ratio and premium image size.
- Builders are pure: the same input produces the same request.
"""

from __future__ import annotations

import pytest

from visionboard_imaging.data.constants import ImageStyle, SynthesisStrategy
from visionboard_imaging.dto.image import ImagePayload
from visionboard_imaging.dto.synthesis import SynthesisRequest
from visionboard_imaging.services.prompting import (
    IdentityLockStrategy,
    NaturalLanguageStrategy,
    get_ordered_strategies,
    get_prompt_strategy,
)
from visionboard_imaging.services.prompting.common_base import (
    LIKENESS_TEMPERATURE,
    PRESERVATION_AXES,
    join_names,
    resolve_people,
)


def _text_of(turn: dict) -> str:
    return "\n".join(part["text"] for part in turn["parts"] if "text" in part)


def _image_parts(turn: dict) -> list[dict]:
    return [part for part in turn["parts"] if "inline_data" in part]


class TestStrategyFactory:
    def test_identity_lock_is_tried_first(self):
        strategies = get_ordered_strategies()
        assert [s.strategy for s in strategies] == [
            SynthesisStrategy.MULTI_TURN_IDENTITY_LOCK,
            SynthesisStrategy.SINGLE_TURN_NATURAL,
        ]

    def test_lookup_by_strategy(self):
        assert isinstance(get_prompt_strategy(SynthesisStrategy.SINGLE_TURN_NATURAL), NaturalLanguageStrategy)

    def test_text_only_has_no_image_bearing_builder(self):
        with pytest.raises(ValueError):
            get_prompt_strategy(SynthesisStrategy.TEXT_ONLY_FALLBACK)


class TestResolvePeople:
    def test_tags_label_people_in_order(self, family_request: SynthesisRequest):
        people = resolve_people(family_request)
        assert [p.label for p in people] == ["Mom", "Dad"]
        assert people[0].notes == "Curly grey hair, round glasses."
        assert people[1].notes == "Tall, short beard, broad shoulders."

    def test_missing_and_blank_tags_fall_back_to_numbered_labels(self):
        request = SynthesisRequest(
            reference_images=(
                ImagePayload(data=b"a"),
                ImagePayload(data=b"b"),
                ImagePayload(data=b"c"),
            ),
            reference_tags=("  ", "Grandpa"),
            scene_description="at a picnic",
        )
        assert [p.label for p in resolve_people(request)] == ["Person 1", "Grandpa", "Person 3"]

    def test_extra_tags_are_ignored(self):
        request = SynthesisRequest(
            reference_images=(ImagePayload(data=b"a"),),
            reference_tags=("Ann", "Bob"),
            scene_description="at a picnic",
        )
        assert [p.label for p in resolve_people(request)] == ["Ann"]

    @pytest.mark.parametrize(
        ("names", "expected"),
        [([], ""), (["Ann"], "Ann"), (["Ann", "Bob"], "Ann and Bob"), (["A", "B", "C"], "A, B and C")],
    )
    def test_join_names(self, names: list[str], expected: str):
        assert join_names(names) == expected


class TestIdentityLockStrategy:
    """The multi-turn request locks identities before the scene is described."""

    def test_three_turns_with_model_acknowledgment(self, family_request: SynthesisRequest):
        built = IdentityLockStrategy().build(family_request)
        assert built.strategy is SynthesisStrategy.MULTI_TURN_IDENTITY_LOCK
        assert [turn["role"] for turn in built.contents] == ["user", "model", "user"]
        assert _image_parts(built.contents[1]) == []
        assert _image_parts(built.contents[2]) == []

    def test_base_image_is_first_part(self, family_request: SynthesisRequest):
        built = IdentityLockStrategy().build(family_request)
        images = _image_parts(built.contents[0])
        assert len(images) == 3
        assert images[0] == family_request.base_image.to_part()
        assert "FIRST attached image" in _text_of(built.contents[0])

    def test_lock_turn_lists_people_and_all_axes(self, family_request: SynthesisRequest):
        text = _text_of(IdentityLockStrategy().build(family_request).contents[0])
        assert '- "Mom": Curly grey hair, round glasses.' in text
        assert '- "Dad": Tall, short beard, broad shoulders.' in text
        for number, (axis, _detail) in enumerate(PRESERVATION_AXES, start=1):
            assert f"{number}. {axis}:" in text

    def test_acknowledgment_names_people_and_axes(self, family_request: SynthesisRequest):
        ack = _text_of(IdentityLockStrategy().build(family_request).contents[1])
        assert "Mom and Dad" in ack
        for axis, _detail in PRESERVATION_AXES:
            assert axis.lower() in ack

    def test_scene_turn_carries_scene_only_after_lock(self, family_request: SynthesisRequest):
        built = IdentityLockStrategy().build(family_request)
        assert family_request.scene_description not in _text_of(built.contents[0])
        scene = _text_of(built.contents[2])
        assert family_request.scene_description in scene
        assert "REMINDER" in scene

    def test_no_references_without_base_image_anchor(self):
        request = SynthesisRequest(
            reference_images=(ImagePayload(data=b"solo"),),
            scene_description="surfing a big wave",
        )
        built = IdentityLockStrategy().build(request)
        assert "FIRST attached image" not in _text_of(built.contents[0])
        assert '"Person 1"' in _text_of(built.contents[0])

    def test_base_image_only_uses_generic_subject(self, reference_photo: ImagePayload):
        request = SynthesisRequest(base_image=reference_photo, scene_description="on a beach")
        built = IdentityLockStrategy().build(request)
        assert "the person(s) shown" in _text_of(built.contents[1])

    def test_unassigned_notes_become_additional_description(self):
        request = SynthesisRequest(
            reference_images=(ImagePayload(data=b"a"),),
            identity_notes="Freckles.\n\nWears a red cap.",
            scene_description="fishing on a lake",
        )
        text = _text_of(IdentityLockStrategy().build(request).contents[0])
        assert '- "Person 1": Freckles.' in text
        assert "ADDITIONAL PHYSICAL DESCRIPTION:\n- Wears a red cap." in text

    def test_optional_blocks(self, family_request: SynthesisRequest):
        request = family_request.model_copy(
            update={
                "title_text": "Summit 2027",
                "embedded_text": "Keep climbing",
                "style": ImageStyle.WATERCOLOR,
                "is_premium_caller": True,
            }
        )
        scene = _text_of(IdentityLockStrategy().build(request).contents[2])
        assert 'Include the title "Summit 2027"' in scene
        assert '"Keep climbing"' in scene
        assert "ARTISTIC STYLE\nApply soft watercolor aesthetic" in scene
        assert "PREMIUM QUALITY" in scene

    def test_plain_request_has_no_optional_blocks(self, family_request: SynthesisRequest):
        scene = _text_of(IdentityLockStrategy().build(family_request).contents[2])
        for block in ("TEXT RENDERING", "ARTISTIC STYLE", "PREMIUM QUALITY"):
            assert block not in scene

    def test_config_requests_image_and_text(self, family_request: SynthesisRequest):
        config = IdentityLockStrategy().build(family_request).config
        assert config["response_modalities"] == ["IMAGE", "TEXT"]
        assert config["temperature"] == LIKENESS_TEMPERATURE
        assert "image_config" not in config

    def test_build_is_deterministic(self, family_request: SynthesisRequest):
        strategy = IdentityLockStrategy()
        assert strategy.build(family_request) == strategy.build(family_request)


class TestNaturalLanguageStrategy:
    def test_single_user_turn_with_images_first(self, family_request: SynthesisRequest):
        built = NaturalLanguageStrategy().build(family_request)
        assert built.strategy is SynthesisStrategy.SINGLE_TURN_NATURAL
        assert len(built.contents) == 1
        turn = built.contents[0]
        assert turn["role"] == "user"
        assert len(_image_parts(turn)) == 3
        assert "text" in turn["parts"][-1]

    def test_sentence_names_people_and_scene(self, family_request: SynthesisRequest):
        text = NaturalLanguageStrategy.compose_text(family_request)
        assert text.startswith(
            "Use the attached photos of Mom and Dad and generate an image of them "
            "hiking together on a mountain trail at sunrise."
        )
        assert "For reference, Mom looks like this: Curly grey hair, round glasses." in text

    def test_scene_ending_in_period_is_not_doubled(self, family_request: SynthesisRequest):
        request = family_request.model_copy(update={"scene_description": "relaxing on a beach at sunset. "})
        text = NaturalLanguageStrategy.compose_text(request)
        assert "generate an image of them relaxing on a beach at sunset. " in text
        assert ".." not in text

    def test_untagged_subject_reads_naturally(self, reference_photo: ImagePayload):
        request = SynthesisRequest(base_image=reference_photo, scene_description="at a concert")
        assert NaturalLanguageStrategy.compose_text(request).startswith(
            "Use the attached photos of these people and generate an image of them at a concert."
        )

    def test_style_and_text_sentences(self, family_request: SynthesisRequest):
        request = family_request.model_copy(update={"title_text": "Big Year", "style": ImageStyle.CYBERPUNK})
        text = NaturalLanguageStrategy.compose_text(request)
        assert 'Please write the title "Big Year"' in text
        assert "neon" in text

    def test_config_requests_image_only(self, family_request: SynthesisRequest):
        config = NaturalLanguageStrategy().build(family_request).config
        assert config["response_modalities"] == ["IMAGE"]


class TestGenerationConfig:
    @pytest.mark.parametrize("strategy_class", [IdentityLockStrategy, NaturalLanguageStrategy])
    def test_aspect_ratio_and_premium_size(self, strategy_class, family_request: SynthesisRequest):
        request = family_request.model_copy(update={"aspect_ratio": "16:9", "is_premium_caller": True})
        config = strategy_class().build(request).config
        assert config["image_config"] == {"aspect_ratio": "16:9", "image_size": "2K"}

    def test_aspect_ratio_without_premium(self, family_request: SynthesisRequest):
        request = family_request.model_copy(update={"aspect_ratio": "1:1"})
        config = NaturalLanguageStrategy().build(request).config
        assert config["image_config"] == {"aspect_ratio": "1:1"}
