"""Heuristic spam scoring for submitted responses.

The scorer runs a fixed, ordered list of named heuristics over every
text-bearing response value. Each triggered (heuristic, field) pair adds
the heuristic's weight to the score. The score is capped at 1.0 and a
submission is spam when it reaches the configured threshold.

Reasons are only reported for spam verdicts, so a clean verdict always has
an empty reason list even when weak signals fired below the threshold.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

from models.form import FieldSpec, FieldType
from models.spam import SpamAnalysis, SpamScoringConfig
from utils.constants import URL_FRIENDLY_KEYWORDS

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"https?://\S+|www\.\S+", re.IGNORECASE)
CONSONANT_RUN_PATTERN = re.compile(r"[bcdfghjklmnpqrstvwxz]{7,}", re.IGNORECASE)
WORD_PATTERN = re.compile(r"[A-Za-z]+")
VOWELS = frozenset("aeiouyAEIOUY")


@dataclass(frozen=True)
class ResponseText:
    """A text-bearing response value with the context heuristics need."""

    key: str
    text: str
    items: tuple[str, ...]
    field: FieldSpec | None = None

    @property
    def label(self) -> str:
        return self.field.label if self.field else ""

    @property
    def field_type(self) -> FieldType | None:
        return self.field.type if self.field else None

    def mentions(self, words: Iterable[str]) -> bool:
        """Whether the key or field label contains any of the words."""
        haystack = f"{self.key} {self.label}".lower()
        return any(word in haystack for word in words)


Heuristic = Callable[[ResponseText, SpamScoringConfig], bool]


def is_invalid_email(entry: ResponseText, config: SpamScoringConfig) -> bool:
    if entry.field_type != FieldType.EMAIL and not entry.mentions(("email",)):
        return False
    for item in entry.items:
        try:
            validate_email(item, check_deliverability=False)
        except EmailNotValidError:
            return True
    return False


def has_excessive_caps(entry: ResponseText, config: SpamScoringConfig) -> bool:
    letters = [c for c in entry.text if c.isalpha()]
    if len(letters) < config.caps_min_letters:
        return False
    upper = sum(1 for c in letters if c.isupper())
    return upper / len(letters) > config.caps_ratio


def has_repeated_characters(entry: ResponseText, config: SpamScoringConfig) -> bool:
    pattern = rf"(\S)\1{{{config.repeat_run - 1},}}"
    return re.search(pattern, entry.text) is not None


def has_spam_keywords(entry: ResponseText, config: SpamScoringConfig) -> bool:
    lowered = entry.text.lower()
    return any(keyword in lowered for keyword in config.keywords)


def has_unexpected_url(entry: ResponseText, config: SpamScoringConfig) -> bool:
    if entry.field_type == FieldType.URL or entry.mentions(URL_FRIENDLY_KEYWORDS):
        return False
    return URL_PATTERN.search(entry.text) is not None


def has_url_density(entry: ResponseText, config: SpamScoringConfig) -> bool:
    return len(URL_PATTERN.findall(entry.text)) >= config.max_urls


def looks_like_gibberish(entry: ResponseText, config: SpamScoringConfig) -> bool:
    """Long vowel-less tokens or long consonant runs, e.g. 'xkcdqwrtplm'."""
    text = URL_PATTERN.sub(" ", entry.text)
    for word in WORD_PATTERN.findall(text):
        if len(word) >= 12 and not VOWELS.intersection(word):
            return True
        if CONSONANT_RUN_PATTERN.search(word):
            return True
    return False


def is_oversized_short_answer(entry: ResponseText, config: SpamScoringConfig) -> bool:
    """Essay-sized or multi-line content pasted into a one-line text field."""
    if entry.field_type != FieldType.TEXT:
        return False
    text = entry.text.strip()
    return len(text) > config.short_answer_max_chars or "\n" in text


# Evaluation order is the order reasons are reported in
HEURISTICS: tuple[tuple[str, Heuristic, str], ...] = (
    ("invalid_email", is_invalid_email, "Invalid email format: {key}"),
    ("excessive_caps", has_excessive_caps, "Excessive capitalization in {key}"),
    ("repeated_characters", has_repeated_characters, "Repetitive characters in {key}"),
    ("spam_keywords", has_spam_keywords, "Spam keywords detected in {key}"),
    ("unexpected_url", has_unexpected_url, "Unexpected URL in {key}"),
    ("url_density", has_url_density, "Excessive links in {key}"),
    ("gibberish", looks_like_gibberish, "Gibberish text in {key}"),
    (
        "oversized_short_answer",
        is_oversized_short_answer,
        "Unusually long answer in {key}",
    ),
)


def collect_texts(
    responses: Mapping[str, Any], fields: Iterable[FieldSpec] | None = None
) -> list[ResponseText]:
    """Extract text-bearing values in key order; other values are ignored."""
    by_id = {f.id: f for f in fields} if fields else {}

    entries = []
    for key in sorted(responses):
        value = responses[key]
        if isinstance(value, str):
            items = (value,)
        elif isinstance(value, (list, tuple)):
            items = tuple(v for v in value if isinstance(v, str))
        else:
            continue
        if not any(item.strip() for item in items):
            continue
        entries.append(
            ResponseText(
                key=key, text="\n".join(items), items=items, field=by_id.get(key)
            )
        )
    return entries


class SpamScorer:
    """Scores response maps with a configurable set of heuristic weights."""

    def __init__(self, config: SpamScoringConfig | None = None):
        """Initialize the scorer with configuration."""
        self.config = config or SpamScoringConfig()

    def analyze(
        self,
        responses: Mapping[str, Any],
        fields: Iterable[FieldSpec] | None = None,
    ) -> SpamAnalysis:
        """Score one response map.

        Args:
            responses: Field id to submitted value
            fields: Optional form fields, used for type-aware heuristics

        Returns:
            SpamAnalysis with confidence in [0, 1]
        """
        entries = collect_texts(responses, fields)

        score = 0.0
        reasons = []
        for name, heuristic, template in HEURISTICS:
            weight = self.config.weight(name)
            if weight <= 0:
                continue
            for entry in entries:
                if heuristic(entry, self.config):
                    score += weight
                    reasons.append(template.format(key=entry.key))

        confidence = round(min(score, 1.0), 2)
        if confidence < self.config.threshold:
            return SpamAnalysis.clean(confidence)

        logger.info(
            "Flagged submission as spam (confidence %.2f): %s",
            confidence,
            "; ".join(reasons),
        )
        return SpamAnalysis(is_spam=True, confidence=confidence, reasons=reasons)


def analyze(
    responses: Mapping[str, Any],
    fields: Iterable[FieldSpec] | None = None,
    config: SpamScoringConfig | None = None,
) -> SpamAnalysis:
    """Score a response map with default or given configuration."""
    return SpamScorer(config).analyze(responses, fields)
