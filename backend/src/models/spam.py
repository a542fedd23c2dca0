"""Spam analysis result and scoring configuration models."""

from pydantic import BaseModel, ConfigDict, Field

from utils.constants import (
    DEFAULT_SPAM_KEYWORDS,
    SPAM_THRESHOLD,
)


class SpamAnalysis(BaseModel):
    """Advisory spam verdict for one response map.

    Derived from the responses and never authoritative: is_spam is True
    exactly when reasons is non-empty.
    """

    is_spam: bool = Field(..., alias="isSpam")
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasons: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def clean(cls, confidence: float = 0.0) -> "SpamAnalysis":
        """A not-spam verdict."""
        return cls(is_spam=False, confidence=confidence, reasons=[])


class SpamScoringConfig(BaseModel):
    """Configuration for the heuristic spam scorer."""

    threshold: float = Field(
        default=SPAM_THRESHOLD,
        gt=0.0,
        le=1.0,
        description="Confidence at or above which a submission is spam",
    )

    # Heuristic weights, summed per triggered (heuristic, field) pair
    weights: dict[str, float] = Field(
        default={
            "invalid_email": 0.3,
            "excessive_caps": 0.2,
            "repeated_characters": 0.2,
            "spam_keywords": 0.4,
            "unexpected_url": 0.3,
            "url_density": 0.3,
            "gibberish": 0.2,
            "oversized_short_answer": 0.2,
        },
        description="Weight contributed by each heuristic",
    )

    keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SPAM_KEYWORDS),
        description="Lower-case phrases that mark a value as spam",
    )

    caps_ratio: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Upper-case share of letters considered shouting",
    )
    caps_min_letters: int = Field(
        default=8, ge=1, description="Shorter values are never flagged for capitals"
    )
    repeat_run: int = Field(
        default=5,
        ge=2,
        description="Identical consecutive characters that count as noise",
    )
    max_urls: int = Field(
        default=3, ge=1, description="URLs in one value that count as link spam"
    )
    short_answer_max_chars: int = Field(
        default=300,
        ge=1,
        description="Longest plausible answer to a short text field",
    )

    def weight(self, heuristic: str) -> float:
        """Get the configured weight for a heuristic."""
        return self.weights.get(heuristic, 0.0)
