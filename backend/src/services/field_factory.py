"""Factory for new form fields with type-appropriate defaults."""

import logging
from typing import Any

from pydantic import ValidationError
from ulid import ULID

from models.form import FieldSpec, FieldType, FieldValidation

logger = logging.getLogger(__name__)

_DEFAULT_OPTIONS = ["Option 1", "Option 2", "Option 3"]
_RATING_SCALE = ["1", "2", "3", "4", "5"]

# Toolbox defaults: (label, placeholder, options)
FIELD_DEFAULTS: dict[FieldType, tuple[str, str | None, list[str] | None]] = {
    FieldType.TEXT: ("Short Text", "Enter text...", None),
    FieldType.TEXTAREA: ("Long Text", "Enter detailed text...", None),
    FieldType.EMAIL: ("Email", "email@example.com", None),
    FieldType.PHONE: ("Phone", "+1 (555) 000-0000", None),
    FieldType.NUMBER: ("Number", "0", None),
    FieldType.URL: ("Website URL", "https://example.com", None),
    FieldType.DATE: ("Date", None, None),
    FieldType.DATETIME: ("Date & Time", None, None),
    FieldType.TIME: ("Time", None, None),
    FieldType.COLOR: ("Color Picker", None, None),
    FieldType.RANGE: ("Slider", None, None),
    FieldType.TAGS: ("Tags Input", "Add tags...", None),
    FieldType.RADIO: ("Multiple Choice", None, _DEFAULT_OPTIONS),
    FieldType.CHECKBOX: ("Checkboxes", None, _DEFAULT_OPTIONS),
    FieldType.SELECT: ("Dropdown", None, _DEFAULT_OPTIONS),
    FieldType.TOGGLE: ("Toggle Switch", None, None),
    FieldType.RATING: ("Star Rating", None, _RATING_SCALE),
    FieldType.FILE: ("File Upload", None, None),
    FieldType.HEADING: ("Section Heading", None, None),
    FieldType.PARAGRAPH: ("Add descriptive text here...", None, None),
    FieldType.IMAGE: ("Image", None, None),
    FieldType.DIVIDER: ("Divider", None, None),
    FieldType.PAGEBREAK: ("Page Break", None, None),
    FieldType.THANKYOU: ("Thank you for your submission!", None, None),
}


def new_field_id() -> str:
    """Generate a fresh, sortable field id."""
    return str(ULID())


def create_field(field_type: FieldType | str) -> FieldSpec:
    """Create a field of the given type populated with toolbox defaults.

    Raises:
        ValueError: If field_type is not a known field type
    """
    field_type = FieldType(field_type)
    label, placeholder, options = FIELD_DEFAULTS[field_type]

    validation = None
    if field_type == FieldType.RANGE:
        validation = FieldValidation(min=0, max=100, step=1)

    return FieldSpec(
        id=new_field_id(),
        type=field_type,
        label=label,
        placeholder=placeholder,
        options=list(options) if options else None,
        validation=validation,
    )


def duplicate_field(spec: FieldSpec) -> FieldSpec:
    """Deep copy a field under a fresh id."""
    return spec.model_copy(deep=True, update={"id": new_field_id()})


def accept_suggestions(proposals: list[dict[str, Any]]) -> list[FieldSpec]:
    """Turn externally proposed field shapes into fields with fresh ids.

    Ids supplied by the proposer are always discarded. Proposals with an
    unknown type or an invalid shape are skipped.
    """
    accepted = []
    for position, proposal in enumerate(proposals):
        data = {k: v for k, v in proposal.items() if k != "id"}
        field_type = data.get("type")
        try:
            FieldType(field_type)
        except ValueError:
            logger.warning(
                "Skipping suggestion %d with unknown field type %r", position, field_type
            )
            continue

        data.setdefault("label", FIELD_DEFAULTS[FieldType(field_type)][0])
        try:
            accepted.append(FieldSpec(id=new_field_id(), **data))
        except ValidationError as e:
            logger.warning("Skipping malformed suggestion %d: %s", position, e)

    return accepted
