# visionboard_imaging/data/constants.py
from enum import Enum


class SynthesisStrategy(str, Enum):
    """Prompt shapes tried against a backend model, in the order they are tried."""
    MULTI_TURN_IDENTITY_LOCK = "multi_turn_identity_lock"
    SINGLE_TURN_NATURAL = "single_turn_natural"
    TEXT_ONLY_FALLBACK = "text_only_fallback"


class ImageStyle(str, Enum):
    PHOTOREALISTIC = "photorealistic"
    CINEMATIC = "cinematic"
    OIL_PAINTING = "oil_painting"
    WATERCOLOR = "watercolor"
    CYBERPUNK = "cyberpunk"
    RENDER_3D = "3d_render"

    @classmethod
    def parse(cls, value: str) -> "ImageStyle":
        """Accepts canonical names plus the hyphenated and alias spellings used by clients."""
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        key = _STYLE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(style.value for style in cls)
            raise ValueError(f"Unknown style '{value}'. Expected one of: {allowed}") from None


_STYLE_ALIASES = {
    "neon": "cyberpunk",
    "3d": "3d_render",
    "render_3d": "3d_render",
    "oil": "oil_painting",
    "photo": "photorealistic",
    "realistic": "photorealistic",
}


DEFAULT_IMAGE_MIME = "image/jpeg"
GENERATED_IMAGE_MIME = "image/png"
