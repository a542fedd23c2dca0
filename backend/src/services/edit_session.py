"""Editing session for one form definition."""

import logging
from datetime import UTC, datetime
from typing import Any

from models.edit import AddField, MoveField, RemoveField, UpdateField
from models.form import FieldSpec, FieldType, FormDefinition
from utils.constants import DEFAULT_HISTORY_DEPTH

from .collaborators import CollaboratorError, FieldSuggester, FormStore
from .edit_history import EditHistory, FieldList, StructuralError
from .field_factory import accept_suggestions, create_field, duplicate_field
from .page_segmentation import PageLayout, segment_pages

logger = logging.getLogger(__name__)


class EditSession:
    """Owns the edit history of one form while it is being edited.

    All changes to the element list go through EditHistory commands so they
    can be undone. Metadata (title, description, style) is edited directly.
    """

    def __init__(
        self,
        definition: FormDefinition,
        store: FormStore | None = None,
        suggester: FieldSuggester | None = None,
        max_depth: int | None = DEFAULT_HISTORY_DEPTH,
    ):
        """Initialize the session.

        Args:
            definition: Form being edited
            store: Optional persistence collaborator used by save()
            suggester: Optional AI field-suggestion collaborator
            max_depth: Undo depth bound, None for unbounded
        """
        self.definition = definition.model_copy(deep=True)
        self.store = store
        self.suggester = suggester
        self.history = EditHistory(definition.elements, max_depth=max_depth)

    @property
    def fields(self) -> FieldList:
        return self.history.present

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def add_field(
        self, field_type: FieldType | str, index: int | None = None
    ) -> FieldSpec:
        """Create a field with defaults and insert it."""
        spec = create_field(field_type)
        self.history.apply(AddField(spec=spec, index=index))
        return spec

    def insert_field(self, spec: FieldSpec, index: int | None = None) -> FieldList:
        return self.history.apply(AddField(spec=spec, index=index))

    def add_page_break(self, index: int | None = None) -> FieldSpec:
        return self.add_field(FieldType.PAGEBREAK, index)

    def remove_field(self, field_id: str) -> FieldList:
        return self.history.apply(RemoveField(field_id=field_id))

    def update_field(self, field_id: str, **patch: Any) -> FieldList:
        return self.history.apply(UpdateField(field_id=field_id, patch=patch))

    def move_field(self, from_index: int, to_index: int) -> FieldList:
        return self.history.apply(MoveField(from_index=from_index, to_index=to_index))

    def duplicate_field(self, field_id: str) -> FieldSpec:
        """Insert a copy of a field right after the original."""
        for index, spec in enumerate(self.fields):
            if spec.id == field_id:
                copy = duplicate_field(spec)
                self.history.apply(AddField(spec=copy, index=index + 1))
                return copy
        raise StructuralError(f"Field {field_id} not found")

    def accept_suggestions(self, proposals: list[dict[str, Any]]) -> list[FieldSpec]:
        """Append externally proposed fields, each as its own undoable command."""
        accepted = accept_suggestions(proposals)
        for spec in accepted:
            self.history.apply(AddField(spec=spec))
        logger.info(
            "Accepted %d of %d suggested fields", len(accepted), len(proposals)
        )
        return accepted

    def suggest(self, prompt: str) -> list[FieldSpec]:
        """Ask the suggestion collaborator for fields and append them.

        Raises:
            CollaboratorError: If no suggester is configured or it fails
        """
        if self.suggester is None:
            raise CollaboratorError("No field suggestion service configured")
        proposals = self.suggester.suggest_fields(prompt)
        return self.accept_suggestions(proposals)

    def undo(self) -> FieldList:
        return self.history.undo()

    def redo(self) -> FieldList:
        return self.history.redo()

    def pages(self) -> PageLayout:
        return segment_pages(self.fields)

    def to_definition(self) -> FormDefinition:
        """Snapshot the form with the present element list."""
        return self.definition.model_copy(
            update={"elements": [spec.model_copy(deep=True) for spec in self.fields]},
            deep=True,
        )

    def save(self) -> str:
        """Persist the present state of the form.

        Returns:
            The form id reported by the store

        Raises:
            CollaboratorError: If no store is configured or saving fails
        """
        if self.store is None:
            raise CollaboratorError("No form store configured")

        definition = self.to_definition()
        definition.updated_at = datetime.now(UTC).isoformat()
        form_id = self.store.save_form(definition)
        self.definition = definition.model_copy(update={"id": form_id})
        logger.info("Saved form %s with %d fields", form_id, len(self.fields))
        return form_id
