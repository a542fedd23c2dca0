"""Tabular projection of submissions for export."""

from dataclasses import dataclass, field

from models.form import FormDefinition, FormSubmission


@dataclass
class SubmissionTable:
    """Column headers plus one row of cell strings per submission."""

    columns: list[tuple[str, str]] = field(default_factory=list)  # (key, header)
    rows: list[list[str]] = field(default_factory=list)

    @property
    def headers(self) -> list[str]:
        return [header for _, header in self.columns]


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def build_submission_table(
    definition: FormDefinition, submissions: list[FormSubmission]
) -> SubmissionTable:
    """Project submissions onto the form's response fields in display order.

    Columns are reconstructed from field ids, followed by the submission
    time. Responses to fields that no longer exist are left out; fields
    added after a submission show as empty cells.
    """
    fields = definition.response_fields
    columns = [(f.id, f.label or f.id) for f in fields]
    columns.append(("submitted_at", "Submitted At"))

    rows = []
    for submission in submissions:
        row = [_cell(submission.responses.get(f.id)) for f in fields]
        row.append(submission.submitted_at)
        rows.append(row)

    return SubmissionTable(columns=columns, rows=rows)
