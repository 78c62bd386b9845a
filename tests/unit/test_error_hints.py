"""Tests for visionboard_imaging.services.error_hints: actionable failure messages."""

from __future__ import annotations

import orjson
import pytest

from visionboard_imaging.services.error_hints import (
    API_KEY_URL,
    EXHAUSTION_PREFIX,
    EXHAUSTION_SUFFIX,
    build_exhaustion_message,
    describe_api_error,
    with_upstream_hint,
)


class TestUpstreamHints:
    @pytest.mark.parametrize(
        ("message", "hint"),
        [
            ("API_KEY_INVALID", API_KEY_URL),
            ("PERMISSION_DENIED on model", "Vertex AI access"),
            ("RESOURCE_EXHAUSTED: slow down", "Rate limit exceeded"),
        ],
    )
    def test_known_categories_get_hint(self, message: str, hint: str):
        assert with_upstream_hint(message).startswith(message)
        assert hint in with_upstream_hint(message)

    def test_unknown_error_unchanged(self):
        assert with_upstream_hint("Internal error") == "Internal error"

    def test_first_matching_rule_wins(self):
        """Only one hint is appended even when several categories appear."""
        hinted = with_upstream_hint("PERMISSION_DENIED then RESOURCE_EXHAUSTED")
        assert "Vertex AI access" in hinted
        assert "Rate limit" not in hinted


class TestDescribeApiError:
    def test_code_status_message_and_reason(self):
        details = {"error": {"details": [{"reason": "API_KEY_INVALID"}]}}
        text = describe_api_error(400, "INVALID_ARGUMENT", "API key not valid.", details)
        assert text.startswith("400: INVALID_ARGUMENT: API key not valid. (API_KEY_INVALID)")
        assert text.endswith(f"Please get a new API key from {API_KEY_URL}")

    def test_status_not_repeated_when_in_message(self):
        text = describe_api_error(429, "RESOURCE_EXHAUSTED", "RESOURCE_EXHAUSTED: quota hit", None)
        assert text.startswith("429: RESOURCE_EXHAUSTED: quota hit")
        assert text.count("RESOURCE_EXHAUSTED") == 1
        assert "Rate limit exceeded" in text

    def test_missing_everything(self):
        assert describe_api_error(None, None, None, None) == "Unknown error"


class TestExhaustionMessage:
    def test_invalid_key_replaces_generic_prefix(self):
        message = build_exhaustion_message({"m1": "400: API_KEY_INVALID"})
        assert message.startswith("Your Gemini API key is invalid.")
        assert EXHAUSTION_PREFIX not in message

    def test_not_found_suggests_new_key(self):
        message = build_exhaustion_message({"m1": "404: NOT_FOUND: models/m1 is not found"})
        assert message.startswith(EXHAUSTION_PREFIX + "The image generation models may not be available")

    def test_quota_hint(self):
        message = build_exhaustion_message({"m1": "429: quota exceeded for project"})
        assert "API quota exceeded" in message

    def test_generic_message_without_match(self):
        message = build_exhaustion_message({"m1": "500: Internal error"})
        assert message.startswith(EXHAUSTION_PREFIX + EXHAUSTION_SUFFIX)

    def test_technical_details_contain_every_model(self):
        errors = {"m1": "404: gone", "m2": "Request timed out", "m3": "No image in response"}
        message = build_exhaustion_message(errors)
        _, _, details = message.partition(" Technical details: ")
        assert orjson.loads(details) == errors
