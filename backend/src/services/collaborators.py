"""Boundary contracts for the collaborators the form pipeline talks to.

Persistence and AI field suggestion live outside this package. Sessions
accept any object satisfying these protocols; failures must surface as
CollaboratorError so the caller can retry.
"""

from typing import Any, Protocol

from models.form import FormDefinition, Value


class CollaboratorError(Exception):
    """A persistence or suggestion collaborator failed."""


class FormNotFoundError(CollaboratorError):
    """The requested form does not exist in the store."""

    def __init__(self, form_id: str):
        super().__init__(f"Form {form_id} not found")
        self.form_id = form_id


class FormStore(Protocol):
    def save_form(self, definition: FormDefinition) -> str: ...

    def load_form(self, form_id: str) -> FormDefinition: ...


class SubmissionRecorder(Protocol):
    def record_submission(self, form_id: str, responses: dict[str, Value]) -> str: ...


class FieldSuggester(Protocol):
    def suggest_fields(self, prompt: str) -> list[dict[str, Any]]: ...
