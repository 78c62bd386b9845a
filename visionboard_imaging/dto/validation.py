# visionboard_imaging/dto/validation.py
from pydantic import BaseModel, Field


class LikenessVerdict(BaseModel):
    """Structured comparison of a generated image against the reference photos."""

    likeness_score: float = Field(ge=0.0, le=1.0, description="1.0 is a perfect match")
    face_match: bool
    skin_tone_match: bool
    age_match: bool
    body_type_match: bool
    overall_recognizable: bool
    explanation: str
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class LikenessValidationOutcome(BaseModel):
    validation: LikenessVerdict | None = None
    model_used: str | None = None
    skipped: bool = False
    likeness_score: float | None = None
    reason: str | None = None
    raw_response: str | None = None
    error: str | None = None

