"""Data models for the form pipeline."""

from .analytics import SubmissionSummary, TimeRange
from .edit import AddField, EditCommand, MoveField, RemoveField, UpdateField
from .form import (
    CHOICE_FIELD_TYPES,
    LAYOUT_FIELD_TYPES,
    OPTION_FIELD_TYPES,
    FieldSpec,
    FieldStyle,
    FieldType,
    FieldValidation,
    FormDefinition,
    FormSettings,
    FormSubmission,
    Value,
)
from .spam import SpamAnalysis, SpamScoringConfig
from .validation import ValidationResult

__all__ = [
    "FieldType",
    "FieldSpec",
    "FieldStyle",
    "FieldValidation",
    "FormDefinition",
    "FormSettings",
    "FormSubmission",
    "Value",
    "LAYOUT_FIELD_TYPES",
    "CHOICE_FIELD_TYPES",
    "OPTION_FIELD_TYPES",
    "AddField",
    "RemoveField",
    "UpdateField",
    "MoveField",
    "EditCommand",
    "SpamAnalysis",
    "SpamScoringConfig",
    "ValidationResult",
    "SubmissionSummary",
    "TimeRange",
]
