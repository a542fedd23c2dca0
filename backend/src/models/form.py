"""Form definition, field specification and submission data models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from utils.constants import DEFAULT_SUBMIT_MESSAGE

from .spam import SpamAnalysis


class FieldType(str, Enum):
    """Field primitives a form can be assembled from."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PHONE = "phone"
    NUMBER = "number"
    URL = "url"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    COLOR = "color"
    RANGE = "range"
    FILE = "file"
    RATING = "rating"
    TOGGLE = "toggle"
    TAGS = "tags"
    HEADING = "heading"  # label doubles as content
    PARAGRAPH = "paragraph"  # label doubles as content
    IMAGE = "image"
    DIVIDER = "divider"
    PAGEBREAK = "pagebreak"  # page sentinel
    THANKYOU = "thankyou"  # terminal message shown after submit


# Presentational elements: never validated, never present in a response map
LAYOUT_FIELD_TYPES: frozenset[FieldType] = frozenset(
    {
        FieldType.HEADING,
        FieldType.PARAGRAPH,
        FieldType.IMAGE,
        FieldType.DIVIDER,
        FieldType.PAGEBREAK,
        FieldType.THANKYOU,
    }
)

CHOICE_FIELD_TYPES: frozenset[FieldType] = frozenset(
    {FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX}
)

OPTION_FIELD_TYPES: frozenset[FieldType] = CHOICE_FIELD_TYPES | {FieldType.RATING}

NUMERIC_FIELD_TYPES: frozenset[FieldType] = frozenset(
    {FieldType.NUMBER, FieldType.RANGE}
)

TEXT_FIELD_TYPES: frozenset[FieldType] = frozenset(
    {FieldType.TEXT, FieldType.TEXTAREA}
)

# Expected response value shape per field type.
# "text" -> str, "number" -> int/float, "list" -> list[str], "bool" -> bool,
# "files" -> list of file names, "choice" -> str (or int for rating)
VALUE_KINDS: dict[FieldType, str] = {
    FieldType.TEXT: "text",
    FieldType.TEXTAREA: "text",
    FieldType.EMAIL: "text",
    FieldType.PHONE: "text",
    FieldType.URL: "text",
    FieldType.DATE: "text",
    FieldType.DATETIME: "text",
    FieldType.TIME: "text",
    FieldType.COLOR: "text",
    FieldType.NUMBER: "number",
    FieldType.RANGE: "number",
    FieldType.SELECT: "choice",
    FieldType.RADIO: "choice",
    FieldType.RATING: "choice",
    FieldType.CHECKBOX: "list",
    FieldType.TAGS: "list",
    FieldType.FILE: "files",
    FieldType.TOGGLE: "bool",
}

Value = str | int | float | bool | list[str]


class FieldValidation(BaseModel):
    """Typed constraints for a field; the applicable subset depends on type."""

    min: float | None = Field(None, description="Minimum numeric value")
    max: float | None = Field(None, description="Maximum numeric value")
    step: float | None = Field(None, gt=0, description="Numeric step size")
    min_length: int | None = Field(
        None, ge=0, alias="minLength", description="Minimum text length"
    )
    max_length: int | None = Field(
        None, ge=0, alias="maxLength", description="Maximum text length"
    )
    pattern: str | None = Field(None, description="Regular expression to match")
    accepted_files: list[str] | None = Field(
        None,
        alias="acceptedFiles",
        description="Allowed file extensions (.pdf) or MIME types (image/*)",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class FieldStyle(BaseModel):
    """Layout and display hints, consumed only by rendering."""

    columns: int | None = None
    font_size: str | None = Field(None, alias="fontSize")
    alignment: str | None = None
    image_url: str | None = Field(None, alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)


class FieldSpec(BaseModel):
    """One declarative form element."""

    id: str = Field(..., min_length=1, description="Unique id within the form")
    type: FieldType = Field(..., description="Field primitive")
    label: str = Field(default="", description="Display label or content text")
    required: bool = Field(default=False, description="Whether a value is required")
    placeholder: str | None = Field(None, description="Input hint")
    options: list[str] | None = Field(
        None, description="Choices for select, radio, checkbox and rating"
    )
    validation: FieldValidation | None = None
    style: FieldStyle | None = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("options")
    @classmethod
    def validate_options_not_empty(cls, v: list[str] | None) -> list[str] | None:
        """Options, when given, must list at least one entry."""
        if v is not None and len(v) == 0:
            raise ValueError("options must not be empty")
        return v

    @model_validator(mode="after")
    def validate_choice_options(self) -> "FieldSpec":
        """Choice fields need at least two options to choose from."""
        if (
            self.type in CHOICE_FIELD_TYPES
            and self.options is not None
            and len(self.options) < 2
        ):
            raise ValueError(f"{self.type.value} field needs at least 2 options")
        return self

    @property
    def is_layout(self) -> bool:
        """True for presentational elements that never take a value."""
        return self.type in LAYOUT_FIELD_TYPES

    @property
    def collects_response(self) -> bool:
        return not self.is_layout

    @property
    def is_required(self) -> bool:
        """Effective requiredness; layout elements are never required."""
        return self.required and not self.is_layout


class FormSettings(BaseModel):
    """Post-submit behaviour of a published form."""

    submit_message: str = Field(DEFAULT_SUBMIT_MESSAGE, alias="submitMessage")
    redirect_url: str | None = Field(None, alias="redirectUrl")

    model_config = ConfigDict(populate_by_name=True)


class FormDefinition(BaseModel):
    """A form: metadata plus the ordered list of elements."""

    id: str = Field(..., description="Form identifier")
    title: str = Field(default="", description="Form title")
    description: str | None = Field(None, description="Form description")
    elements: list[FieldSpec] = Field(
        default_factory=list, description="Ordered fields; order is display order"
    )
    style: dict[str, Any] = Field(default_factory=dict, description="Theme hints")
    settings: FormSettings = Field(default_factory=FormSettings)
    user_id: str | None = Field(None, description="Owner of the form")
    published: bool = Field(default=False)
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "FormDefinition":
        """Element ids must be unique within the form."""
        seen: set[str] = set()
        for element in self.elements:
            if element.id in seen:
                raise ValueError(f"Duplicate field id: {element.id}")
            seen.add(element.id)
        return self

    @property
    def response_fields(self) -> list[FieldSpec]:
        """Fields that contribute to a response map, in display order."""
        return [e for e in self.elements if e.collects_response]

    def get_field(self, field_id: str) -> FieldSpec | None:
        """Get a field by id."""
        for element in self.elements:
            if element.id == field_id:
                return element
        return None


class FormSubmission(BaseModel):
    """A completed set of responses to a form."""

    id: str = Field(..., description="Submission identifier")
    form_id: str | None = Field(None, description="Form the responses belong to")
    responses: dict[str, Value] = Field(default_factory=dict)
    submitted_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    # Advisory only; always re-derivable from responses
    spam_analysis: SpamAnalysis | None = None
