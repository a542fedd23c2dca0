"""Edit commands applied to a form's field list."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from .form import FieldSpec


class AddField(BaseModel):
    """Insert a field at index, or append when index is None."""

    kind: Literal["add"] = "add"
    spec: FieldSpec
    index: int | None = None


class RemoveField(BaseModel):
    """Remove the field with the given id."""

    kind: Literal["remove"] = "remove"
    field_id: str


class UpdateField(BaseModel):
    """Merge a partial set of attributes into an existing field."""

    kind: Literal["update"] = "update"
    field_id: str
    patch: dict[str, Any] = Field(default_factory=dict)


class MoveField(BaseModel):
    """Move the field at from_index so it ends up at to_index."""

    kind: Literal["move"] = "move"
    from_index: int
    to_index: int

    def inverse(self) -> "MoveField":
        return MoveField(from_index=self.to_index, to_index=self.from_index)


EditCommand = Annotated[
    AddField | RemoveField | UpdateField | MoveField,
    Field(discriminator="kind"),
]
