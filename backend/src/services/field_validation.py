"""Per-field validation of response values.

Rules run in a fixed precedence and the first failing rule wins:
presence, value shape and format, range or length, choice membership,
file constraints. Failures are returned as data, never raised.
"""

import logging
import math
import mimetypes
import re
from collections.abc import Iterable, Mapping
from typing import Any

from email_validator import EmailNotValidError, validate_email

from models.form import (
    NUMERIC_FIELD_TYPES,
    TEXT_FIELD_TYPES,
    VALUE_KINDS,
    FieldSpec,
    FieldType,
    FieldValidation,
)
from models.validation import ValidationResult

logger = logging.getLogger(__name__)

REQUIRED = "required"
INVALID_VALUE = "invalid value"
INVALID_EMAIL = "invalid email"
INVALID_FORMAT = "invalid format"
INVALID_CHOICE = "invalid choice"
NOT_A_NUMBER = "must be a number"
FILE_TYPE_NOT_ALLOWED = "file type not allowed"

PATTERN_FIELD_TYPES = frozenset(
    {FieldType.URL, FieldType.PHONE, FieldType.TEXT, FieldType.TEXTAREA}
)

# Relative tolerance for step checks on floats
_STEP_TOLERANCE = 1e-9


def is_empty(value: Any) -> bool:
    """Whether a value counts as absent for the presence rule.

    False (an unchecked toggle) and 0 are real answers.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def validate_field(field: FieldSpec, value: Any = None) -> ValidationResult:
    """Validate a candidate value against a field's rules."""
    if field.is_layout:
        return ValidationResult.success()

    if is_empty(value):
        if field.is_required:
            return ValidationResult.failure(REQUIRED)
        return ValidationResult.success()

    rules = field.validation or FieldValidation()
    for check in (_check_format, _check_range, _check_choice, _check_files):
        error = check(field, value, rules)
        if error:
            return ValidationResult.failure(error)

    return ValidationResult.success()


def validate_page(
    fields: Iterable[FieldSpec], values: Mapping[str, Any]
) -> dict[str, str]:
    """Validate every field on a page.

    Returns:
        Mapping of field id to error reason for failing fields only
    """
    errors = {}
    for field in fields:
        result = validate_field(field, values.get(field.id))
        if not result.ok:
            errors[field.id] = result.error
    return errors


def build_responses(
    fields: Iterable[FieldSpec], values: Mapping[str, Any]
) -> dict[str, Any]:
    """Project collected values onto the response-bearing fields.

    Layout elements never appear as keys; neither do fields left unset.
    """
    responses = {}
    for field in fields:
        if field.is_layout:
            continue
        value = values.get(field.id)
        if value is not None:
            responses[field.id] = value
    return responses


def _check_format(field: FieldSpec, value: Any, rules: FieldValidation) -> str | None:
    """Value shape per field type, then type-specific format."""
    kind = VALUE_KINDS.get(field.type)

    if kind == "text" and not isinstance(value, str):
        return INVALID_VALUE
    if kind == "list" and not _is_string_list(value):
        return INVALID_VALUE
    if kind == "bool" and not isinstance(value, bool):
        return INVALID_VALUE
    if kind == "files" and not (isinstance(value, str) or _is_string_list(value)):
        return INVALID_VALUE
    if kind == "number" and _to_number(value) is None:
        return NOT_A_NUMBER

    if field.type == FieldType.EMAIL:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return INVALID_EMAIL

    if field.type in PATTERN_FIELD_TYPES and rules.pattern:
        try:
            if re.fullmatch(rules.pattern, value) is None:
                return INVALID_FORMAT
        except re.error as e:
            logger.warning("Ignoring bad pattern on field %s: %s", field.id, e)

    return None


def _check_range(field: FieldSpec, value: Any, rules: FieldValidation) -> str | None:
    """Numeric bounds and step, or text length bounds."""
    if field.type in NUMERIC_FIELD_TYPES:
        number = _to_number(value)
        if rules.min is not None and number < rules.min:
            return f"must be at least {_format_number(rules.min)}"
        if rules.max is not None and number > rules.max:
            return f"must be at most {_format_number(rules.max)}"
        if rules.step:
            base = rules.min if rules.min is not None else 0.0
            steps = (number - base) / rules.step
            if not math.isclose(steps, round(steps), abs_tol=_STEP_TOLERANCE):
                return f"must be a multiple of {_format_number(rules.step)}"

    if field.type in TEXT_FIELD_TYPES:
        length = len(value)
        if rules.min_length is not None and length < rules.min_length:
            return f"must be at least {rules.min_length} characters"
        if rules.max_length is not None and length > rules.max_length:
            return f"must be at most {rules.max_length} characters"

    return None


def _check_choice(field: FieldSpec, value: Any, rules: FieldValidation) -> str | None:
    if not field.options:
        return None

    if field.type in (FieldType.SELECT, FieldType.RADIO):
        if value not in field.options:
            return INVALID_CHOICE
    elif field.type == FieldType.RATING:
        if str(value) not in field.options:
            return INVALID_CHOICE
    elif field.type == FieldType.CHECKBOX:
        if not set(value) <= set(field.options):
            return INVALID_CHOICE

    return None


def _check_files(field: FieldSpec, value: Any, rules: FieldValidation) -> str | None:
    if field.type != FieldType.FILE or not rules.accepted_files:
        return None

    names = [value] if isinstance(value, str) else value
    for name in names:
        if not _file_accepted(name, rules.accepted_files):
            return FILE_TYPE_NOT_ALLOWED
    return None


def _file_accepted(filename: str, accepted: list[str]) -> bool:
    """Match a file name against extensions (.pdf, pdf) or MIME types (image/*)."""
    lower = filename.lower()
    mime_type, _ = mimetypes.guess_type(lower)

    for entry in accepted:
        entry = entry.strip().lower()
        if not entry:
            continue
        if "/" in entry:
            if mime_type is None:
                continue
            if entry.endswith("/*"):
                if mime_type.startswith(entry[:-1]):
                    return True
            elif mime_type == entry:
                return True
        else:
            extension = entry if entry.startswith(".") else f".{entry}"
            if lower.endswith(extension):
                return True
    return False


def _to_number(value: Any) -> float | None:
    """Coerce a numeric response, rejecting booleans and non-finite values."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _format_number(number: float) -> str:
    if float(number).is_integer():
        return str(int(number))
    return str(number)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
