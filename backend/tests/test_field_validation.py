"""Tests for the field validation engine."""

import pytest

from conftest import make_field
from services.field_validation import (
    build_responses,
    is_empty,
    validate_field,
    validate_page,
)


class TestPresence:
    """Required-value checks."""

    def test_required_empty_string(self):
        result = validate_field(make_field("f", "text", required=True), "")
        assert not result.ok
        assert result.error == "required"

    def test_optional_empty_string(self):
        assert validate_field(make_field("f", "text", required=False), "").ok

    def test_required_missing(self):
        result = validate_field(make_field("f", "email", required=True), None)
        assert result.error == "required"

    def test_whitespace_counts_as_empty(self):
        assert validate_field(make_field("f", required=True), "   ").error == "required"

    def test_required_empty_checkbox(self):
        spec = make_field("f", "checkbox", required=True, options=["a", "b"])
        assert validate_field(spec, []).error == "required"

    def test_false_toggle_is_a_value(self):
        assert validate_field(make_field("f", "toggle", required=True), False).ok

    def test_zero_is_a_value(self):
        assert validate_field(make_field("f", "number", required=True), 0).ok

    def test_layout_always_ok(self):
        assert validate_field(make_field("h", "heading", required=True), None).ok
        assert validate_field(make_field("p", "pagebreak"), "anything").ok

    def test_is_empty(self):
        assert is_empty(None)
        assert is_empty("")
        assert is_empty([])
        assert not is_empty(False)
        assert not is_empty(0)


class TestFormat:
    """Type-specific format checks."""

    def test_valid_email(self):
        assert validate_field(make_field("e", "email"), "a@b.com").ok

    def test_invalid_email(self):
        result = validate_field(make_field("e", "email"), "not-an-email")
        assert result.error == "invalid email"

    def test_phone_pattern(self):
        spec = make_field("p", "phone", validation={"pattern": r"\+?[0-9 ]{7,15}"})
        assert validate_field(spec, "+1 555 0100").ok
        assert validate_field(spec, "call me").error == "invalid format"

    def test_url_pattern(self):
        spec = make_field("u", "url", validation={"pattern": r"https://.+"})
        assert validate_field(spec, "https://example.org").ok
        assert validate_field(spec, "ftp://example.org").error == "invalid format"

    def test_phone_without_pattern_accepts_text(self):
        assert validate_field(make_field("p", "phone"), "555-0100").ok

    def test_bad_pattern_ignored(self):
        spec = make_field("t", "text", validation={"pattern": "("})
        assert validate_field(spec, "anything").ok

    def test_text_value_must_be_string(self):
        assert validate_field(make_field("t"), 42).error == "invalid value"

    def test_checkbox_value_must_be_list(self):
        spec = make_field("c", "checkbox", options=["a", "b"])
        assert validate_field(spec, "a").error == "invalid value"

    def test_toggle_value_must_be_bool(self):
        assert validate_field(make_field("t", "toggle"), "yes").error == "invalid value"

    def test_number_must_be_numeric(self):
        spec = make_field("n", "number")
        assert validate_field(spec, "abc").error == "must be a number"
        assert validate_field(spec, True).error == "must be a number"
        assert validate_field(spec, "12.5").ok


class TestRangeAndLength:
    """Numeric bounds, step and text length."""

    @pytest.fixture
    def percent(self):
        return make_field("n", "number", validation={"min": 0, "max": 100})

    def test_upper_boundary_inclusive(self, percent):
        assert validate_field(percent, 100).ok

    def test_above_max(self, percent):
        result = validate_field(percent, 101)
        assert not result.ok
        assert result.error == "must be at most 100"

    def test_below_min(self, percent):
        assert validate_field(percent, -1).error == "must be at least 0"

    def test_lower_boundary_inclusive(self, percent):
        assert validate_field(percent, 0).ok

    def test_step(self):
        spec = make_field("r", "range", validation={"min": 0, "max": 10, "step": 2.5})
        assert validate_field(spec, 7.5).ok
        assert validate_field(spec, 3).error == "must be a multiple of 2.5"

    def test_step_relative_to_min(self):
        spec = make_field("r", "range", validation={"min": 1, "step": 2})
        assert validate_field(spec, 5).ok
        assert not validate_field(spec, 4).ok

    def test_float_step_tolerance(self):
        spec = make_field("n", "number", validation={"step": 0.1})
        assert validate_field(spec, 0.3).ok

    def test_text_length(self):
        spec = make_field("t", "textarea", validation={"minLength": 3, "maxLength": 5})
        assert validate_field(spec, "ab").error == "must be at least 3 characters"
        assert validate_field(spec, "abcdef").error == "must be at most 5 characters"
        assert validate_field(spec, "abcd").ok

    def test_optional_empty_skips_length(self):
        spec = make_field("t", "text", validation={"minLength": 3})
        assert validate_field(spec, "").ok


class TestChoice:
    """Choice membership."""

    def test_select_membership(self):
        spec = make_field("s", "select", options=["Red", "Green"])
        assert validate_field(spec, "Red").ok
        assert validate_field(spec, "Blue").error == "invalid choice"

    def test_radio_membership(self):
        spec = make_field("r", "radio", options=["Yes", "No"])
        assert validate_field(spec, "Maybe").error == "invalid choice"

    def test_checkbox_subset(self):
        spec = make_field("c", "checkbox", options=["a", "b", "c"])
        assert validate_field(spec, ["a", "c"]).ok
        assert validate_field(spec, ["a", "z"]).error == "invalid choice"

    def test_rating_accepts_int_or_string(self):
        spec = make_field("r", "rating", options=["1", "2", "3", "4", "5"])
        assert validate_field(spec, 4).ok
        assert validate_field(spec, "5").ok
        assert validate_field(spec, 6).error == "invalid choice"


class TestFiles:
    """Accepted file constraints."""

    @pytest.fixture
    def upload(self):
        return make_field("f", "file", validation={"acceptedFiles": [".pdf", "image/*"]})

    def test_extension_allowed(self, upload):
        assert validate_field(upload, ["resume.PDF"]).ok

    def test_mime_wildcard_allowed(self, upload):
        assert validate_field(upload, ["photo.png"]).ok

    def test_type_not_allowed(self, upload):
        result = validate_field(upload, ["photo.png", "script.exe"])
        assert result.error == "file type not allowed"

    def test_single_name_string(self, upload):
        assert validate_field(upload, "scan.jpg").ok

    def test_no_file_only_error_when_required(self, upload):
        assert validate_field(upload, []).ok
        required = make_field("f", "file", required=True)
        assert validate_field(required, []).error == "required"

    def test_no_constraint_accepts_anything(self):
        assert validate_field(make_field("f", "file"), ["a.exe"]).ok


class TestPageValidation:
    def test_only_failing_fields_reported(self):
        fields = [
            make_field("name", required=True),
            make_field("email", "email", required=True),
            make_field("note"),
            make_field("title", "heading"),
        ]
        errors = validate_page(fields, {"name": "Ann", "email": "nope"})
        assert errors == {"email": "invalid email"}

    def test_build_responses_excludes_layout(self):
        fields = [
            make_field("title", "heading"),
            make_field("name"),
            make_field("agree", "toggle"),
            make_field("skipped"),
        ]
        values = {"title": "ignored", "name": "Ann", "agree": False}
        assert build_responses(fields, values) == {"name": "Ann", "agree": False}
