"""Tests for heuristic spam scoring."""

import pytest

from conftest import make_field
from models.spam import SpamScoringConfig
from services.spam_service import (
    SpamScorer,
    analyze,
    collect_texts,
    has_excessive_caps,
    has_repeated_characters,
    has_url_density,
    is_invalid_email,
    is_oversized_short_answer,
    looks_like_gibberish,
)


@pytest.fixture
def config():
    return SpamScoringConfig()


def _entry(key, value, field=None):
    return collect_texts({key: value}, [field] if field else None)[0]


class TestVerdict:
    """Test cases for the overall verdict and threshold."""

    def test_ordinary_message_is_clean(self):
        result = analyze({"name": "Ann", "message": "Hello there, I'd like a quote."})
        assert result.is_spam is False
        assert result.confidence == 0.0
        assert result.reasons == []

    def test_threshold_is_inclusive(self):
        result = analyze({"email": "bad-address", "name": "HELLO THERE"})
        assert result.is_spam is True
        assert result.confidence == 0.5
        assert result.reasons == [
            "Invalid email format: email",
            "Excessive capitalization in name",
        ]

    def test_below_threshold_has_no_reasons(self):
        result = analyze({"name": "HELLO THERE", "note": "sooooo"})
        assert result.is_spam is False
        assert result.confidence == 0.4
        assert result.reasons == []

    def test_keyword_with_link(self):
        result = analyze({"message": "Claim your prize at http://spam.example"})
        assert result.is_spam is True
        assert result.confidence == 0.7
        assert result.reasons == [
            "Spam keywords detected in message",
            "Unexpected URL in message",
        ]

    def test_confidence_capped(self):
        result = analyze(
            {
                "a": "WIN THE LOTTERY NOW!!!!! http://x.io",
                "b": "FREE MONEY CASINO",
                "email": "nope",
            }
        )
        assert result.is_spam is True
        assert result.confidence == 1.0

    def test_reasons_ordered_by_heuristic_then_key(self):
        result = analyze({"b": "casino", "a": "lottery"})
        assert result.reasons == [
            "Spam keywords detected in a",
            "Spam keywords detected in b",
        ]

    def test_deterministic(self):
        responses = {"x": "CLICK HERE http://a.io", "y": "zzzzzzz"}
        assert analyze(responses) == analyze(responses)

    def test_non_text_values_ignored(self):
        result = analyze({"age": 42, "agree": True, "rating": 5.0})
        assert result == analyze({})
        assert result.confidence == 0.0

    def test_list_values_scored(self):
        result = analyze({"picks": ["casino", 3], "other": ["lottery"]})
        assert result.is_spam is True
        assert len(result.reasons) == 2

    @pytest.mark.parametrize(
        "responses",
        [
            {},
            {"a": ""},
            {"a": "fine"},
            {"a": "viagra"},
            {"a": "AAAAAAAAAAAA"},
            {"email": "x", "b": "y"},
            {"a": "www.one.com www.two.com www.three.com"},
            {"a": ["CASINO", "LOTTERY"], "email": ["ok@example.com", "bad"]},
        ],
    )
    def test_is_spam_iff_reasons(self, responses):
        result = analyze(responses)
        assert result.is_spam == bool(result.reasons)
        assert 0.0 <= result.confidence <= 1.0


class TestFieldAwareness:
    """Heuristics that depend on field types and labels."""

    def test_url_field_exempt_from_unexpected_url(self):
        fields = [make_field("site", "url", label="Company")]
        result = analyze({"site": "https://example.com"}, fields)
        assert result.confidence == 0.0

    def test_url_friendly_key_exempt(self):
        assert analyze({"website": "http://example.com"}).confidence == 0.0

    def test_url_in_plain_text_counts(self):
        result = analyze({"bio": "see https://example.com"})
        assert result.confidence == 0.3
        assert result.is_spam is False

    def test_email_detected_by_field_type(self):
        fields = [make_field("contact", "email")]
        result = analyze({"contact": "not an email"}, fields)
        assert result.confidence == 0.3

    def test_valid_email_not_flagged(self):
        assert analyze({"email": "ann@gmail.com"}).confidence == 0.0


class TestConfiguration:
    def test_lower_threshold(self):
        scorer = SpamScorer(SpamScoringConfig(threshold=0.3))
        result = scorer.analyze({"bio": "see https://example.com"})
        assert result.is_spam is True
        assert result.reasons == ["Unexpected URL in bio"]

    def test_zero_weight_disables_heuristic(self, config):
        weights = dict(config.weights, spam_keywords=0.0)
        scorer = SpamScorer(SpamScoringConfig(weights=weights))
        assert scorer.analyze({"a": "casino lottery"}).confidence == 0.0

    def test_custom_keywords(self):
        scorer = SpamScorer(SpamScoringConfig(keywords=["seo services"]))
        assert scorer.analyze({"a": "Cheap SEO services"}).confidence == 0.4
        assert scorer.analyze({"a": "casino"}).confidence == 0.0

    def test_threshold_must_be_positive(self):
        with pytest.raises(ValueError):
            SpamScoringConfig(threshold=0.0)

    @pytest.mark.parametrize(
        "limits",
        [
            {"repeat_run": 1},
            {"caps_ratio": 1.5},
            {"caps_ratio": -0.1},
            {"max_urls": 0},
            {"caps_min_letters": 0},
            {"short_answer_max_chars": 0},
        ],
    )
    def test_limits_are_bounded(self, limits):
        with pytest.raises(ValueError):
            SpamScoringConfig(**limits)

    def test_smallest_repeat_run(self):
        scorer = SpamScorer(SpamScoringConfig(repeat_run=2, threshold=0.2))
        assert scorer.analyze({"a": "ab cd"}).is_spam is False
        assert scorer.analyze({"a": "aa"}).is_spam is True


class TestHeuristics:
    """Individual heuristic checks."""

    def test_invalid_email(self, config):
        assert is_invalid_email(_entry("email", "nope"), config)
        assert not is_invalid_email(_entry("email", "a@b.com"), config)
        assert not is_invalid_email(_entry("name", "nope"), config)

    def test_caps_needs_enough_letters(self, config):
        assert not has_excessive_caps(_entry("a", "HELLO"), config)
        assert has_excessive_caps(_entry("a", "HELLO WORLD"), config)
        assert not has_excessive_caps(_entry("a", "Hello World Again"), config)

    def test_repeated_characters(self, config):
        assert has_repeated_characters(_entry("a", "hiiiii"), config)
        assert not has_repeated_characters(_entry("a", "hiiii"), config)
        assert not has_repeated_characters(_entry("a", "a     b"), config)

    def test_url_density(self, config):
        text = "http://a.com http://b.com http://c.com"
        assert has_url_density(_entry("a", text), config)
        assert not has_url_density(_entry("a", "http://a.com"), config)

    def test_gibberish(self, config):
        assert looks_like_gibberish(_entry("a", "xkcdqwrtplm"), config)
        assert not looks_like_gibberish(_entry("a", "strengths rhythm"), config)
        assert not looks_like_gibberish(_entry("a", "https://bcdfghjk.com"), config)

    def test_oversized_short_answer(self, config):
        text_field = make_field("a", "text")
        assert is_oversized_short_answer(_entry("a", "x" * 301, text_field), config)
        assert is_oversized_short_answer(_entry("a", "one\ntwo", text_field), config)
        assert not is_oversized_short_answer(_entry("a", "short", text_field), config)

        long_form = make_field("a", "textarea")
        assert not is_oversized_short_answer(_entry("a", "x" * 301, long_form), config)

    def test_collect_texts_skips_blank(self):
        entries = collect_texts({"b": "  ", "a": "x", "c": 1})
        assert [e.key for e in entries] == ["a"]
