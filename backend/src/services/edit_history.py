"""Undo/redo history over field-list edit commands.

History keeps immutable snapshots of the field list. Every snapshot is a
tuple of deep-copied FieldSpecs, so editing the present can never change a
stored past or future entry.
"""

import logging

from pydantic import ValidationError

from models.edit import AddField, EditCommand, MoveField, RemoveField, UpdateField
from models.form import FieldSpec
from utils.constants import DEFAULT_HISTORY_DEPTH

logger = logging.getLogger(__name__)

FieldList = tuple[FieldSpec, ...]

# Attribute names an update patch may carry, by field name or wire alias
_PATCHABLE_KEYS = frozenset(
    key
    for name, info in FieldSpec.model_fields.items()
    for key in (name, info.alias)
    if key
)


class StructuralError(ValueError):
    """An edit or navigation request does not fit the current structure."""


def _snapshot(fields) -> FieldList:
    return tuple(spec.model_copy(deep=True) for spec in fields)


def _index_of(fields: FieldList, field_id: str) -> int:
    for index, spec in enumerate(fields):
        if spec.id == field_id:
            return index
    raise StructuralError(f"Field {field_id} not found")


def apply_command(fields: FieldList, command: EditCommand) -> FieldList:
    """Apply one command to a field list and return the new list.

    The input is never modified.

    Raises:
        StructuralError: If the command does not fit the list
    """
    if isinstance(command, AddField):
        if any(spec.id == command.spec.id for spec in fields):
            raise StructuralError(f"Field {command.spec.id} already exists")
        index = len(fields) if command.index is None else command.index
        if not 0 <= index <= len(fields):
            raise StructuralError(
                f"Insert index {index} out of range for {len(fields)} fields"
            )
        return fields[:index] + (command.spec,) + fields[index:]

    if isinstance(command, RemoveField):
        index = _index_of(fields, command.field_id)
        return fields[:index] + fields[index + 1 :]

    if isinstance(command, UpdateField):
        index = _index_of(fields, command.field_id)
        if command.patch.get("id", command.field_id) != command.field_id:
            raise StructuralError("Field ids are immutable")
        unknown = sorted(set(command.patch) - _PATCHABLE_KEYS)
        if unknown:
            raise StructuralError(
                f"Unknown attributes for field {command.field_id}: {', '.join(unknown)}"
            )
        data = fields[index].model_dump(by_alias=True)
        data.update(command.patch)
        try:
            updated = FieldSpec.model_validate(data)
        except ValidationError as e:
            raise StructuralError(
                f"Invalid update for field {command.field_id}: {e}"
            ) from e
        return fields[:index] + (updated,) + fields[index + 1 :]

    if isinstance(command, MoveField):
        size = len(fields)
        for name, index in (("from", command.from_index), ("to", command.to_index)):
            if not 0 <= index < size:
                raise StructuralError(
                    f"Move {name} index {index} out of range for {size} fields"
                )
        moved = list(fields)
        spec = moved.pop(command.from_index)
        moved.insert(command.to_index, spec)
        return tuple(moved)

    raise StructuralError(f"Unsupported edit command: {command!r}")


class EditHistory:
    """Linear undo/redo history for one editing session."""

    def __init__(self, initial=(), max_depth: int | None = DEFAULT_HISTORY_DEPTH):
        """Initialize the history.

        Args:
            initial: Starting field list
            max_depth: Maximum undo entries kept; None keeps everything
        """
        self.max_depth = max_depth
        self._past: list[FieldList] = []
        self._present: FieldList = _snapshot(initial)
        self._future: list[FieldList] = []

    @property
    def present(self) -> FieldList:
        return self._present

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def undo_depth(self) -> int:
        return len(self._past)

    def apply(self, command: EditCommand) -> FieldList:
        """Apply a command, record the previous state and drop any redo branch.

        Raises:
            StructuralError: If the command is rejected; history is unchanged
        """
        try:
            new_present = _snapshot(apply_command(self._present, command))
        except StructuralError as e:
            logger.warning("Rejected %s command: %s", command.kind, e)
            raise

        self._past.append(self._present)
        if self.max_depth is not None and len(self._past) > self.max_depth:
            del self._past[: len(self._past) - self.max_depth]
        self._present = new_present
        self._future.clear()

        logger.debug(
            "Applied %s command, %d fields, %d undo entries",
            command.kind,
            len(new_present),
            len(self._past),
        )
        return self._present

    def undo(self) -> FieldList:
        """Step back one command. No-op when there is nothing to undo."""
        if not self._past:
            return self._present
        self._future.append(self._present)
        self._present = self._past.pop()
        return self._present

    def redo(self) -> FieldList:
        """Re-apply the last undone command. No-op when nothing was undone."""
        if not self._future:
            return self._present
        self._past.append(self._present)
        self._present = self._future.pop()
        return self._present

    def reset(self, fields=()) -> FieldList:
        """Replace the present list and forget all history."""
        self._past.clear()
        self._future.clear()
        self._present = _snapshot(fields)
        return self._present
