# visionboard_imaging/services/error_hints.py
"""
Best-effort classification of backend failures into actionable hints.

Matching is plain substring search over error text, evaluated in order; the first
matching rule wins. When several failure categories occur in the same call the
hint reflects whichever rule comes first, not necessarily the dominant cause.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple

import orjson

API_KEY_URL = "https://aistudio.google.com/app/apikey"


class HintRule(NamedTuple):
    patterns: tuple[str, ...]
    hint: str
    replaces_prefix: bool = False

    def matches(self, text: str) -> bool:
        return any(pattern in text for pattern in self.patterns)


# Appended to a single upstream error message.
UPSTREAM_ERROR_HINTS: tuple[HintRule, ...] = (
    HintRule(("API_KEY_INVALID",), f" - Please get a new API key from {API_KEY_URL}"),
    HintRule(("PERMISSION_DENIED",), " - This model may require additional permissions or Vertex AI access"),
    HintRule(("RESOURCE_EXHAUSTED",), " - Rate limit exceeded, please try again later"),
)

# Applied to the concatenation of every per-model error once all models failed.
EXHAUSTION_HINTS: tuple[HintRule, ...] = (
    HintRule(
        ("API_KEY_INVALID",),
        "Your Gemini API key is invalid. Please check the GEMINI__API_KEY setting. ",
        replaces_prefix=True,
    ),
    HintRule(
        ("PERMISSION_DENIED", "not found", "404"),
        "The image generation models may not be available with your API key. "
        f"Try getting a new key from {API_KEY_URL} ",
    ),
    HintRule(
        ("RESOURCE_EXHAUSTED", "quota"),
        "API quota exceeded. Please try again later or upgrade your API plan. ",
    ),
)

EXHAUSTION_PREFIX = "Image generation is currently unavailable. "
EXHAUSTION_SUFFIX = "Please check your Gemini API configuration or try again later."


def first_matching_rule(text: str, rules: tuple[HintRule, ...]) -> HintRule | None:
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


def with_upstream_hint(message: str) -> str:
    rule = first_matching_rule(message, UPSTREAM_ERROR_HINTS)
    return message + rule.hint if rule else message


def describe_api_error(code: Any, status: str | None, message: str | None, details: Any) -> str:
    """
    Formats an upstream API error as "<code>: <message> (<reason>)" plus a hint.
    `details` is the raw error JSON returned by the backend, when available.
    """
    text = message or status or "Unknown error"
    if status and status not in text:
        text = f"{status}: {text}"
    reason = _first_error_reason(details)
    if reason:
        text += f" ({reason})"
    text = with_upstream_hint(text)
    return f"{code}: {text}" if code else text


def build_exhaustion_message(errors: Mapping[str, str]) -> str:
    """Human-readable recommendation followed by the full per-model error map."""
    combined = " ".join(errors.values())
    rule = first_matching_rule(combined, EXHAUSTION_HINTS)

    help_message = EXHAUSTION_PREFIX
    if rule is not None:
        help_message = rule.hint if rule.replaces_prefix else help_message + rule.hint
    help_message += EXHAUSTION_SUFFIX

    details = orjson.dumps(dict(errors)).decode()
    return f"{help_message} Technical details: {details}"


def _first_error_reason(details: Any) -> str | None:
    if not isinstance(details, dict):
        return None
    error = details.get("error", details)
    if not isinstance(error, dict):
        return None
    for item in error.get("details") or []:
        if isinstance(item, dict) and item.get("reason"):
            return str(item["reason"])
    return None
