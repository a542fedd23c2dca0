"""Navigation and submission state machine for filling in a form."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from enum import Enum

from ulid import ULID

from models.form import FieldSpec, FormDefinition, FormSubmission, Value

from .collaborators import CollaboratorError, SubmissionRecorder
from .edit_history import StructuralError
from .field_validation import build_responses, validate_page
from .page_segmentation import PageLayout, segment_pages
from .spam_service import SpamScorer

logger = logging.getLogger(__name__)


class FillState(str, Enum):
    """Lifecycle of a fill session."""

    FILLING = "filling"
    SUBMITTED = "submitted"  # terminal for this session


class FillSession:
    """Walks a respondent through the pages of one form.

    Values are collected across pages and only the active page is
    validated when moving forward. Submitting validates the last page,
    assembles the response map and hands it to the submission recorder.
    """

    def __init__(
        self,
        definition: FormDefinition,
        recorder: SubmissionRecorder | None = None,
        spam_scorer: SpamScorer | None = None,
    ):
        """Initialize the session at the first page.

        Args:
            definition: Form being filled
            recorder: Optional collaborator that persists the submission
            spam_scorer: Optional scorer attached to the submission
        """
        self.definition = definition
        self.recorder = recorder
        self.spam_scorer = spam_scorer
        self.layout: PageLayout = segment_pages(definition.elements)

        self.state = FillState.FILLING
        self.page_index = 0
        self.values: dict[str, Value] = {}
        self.errors: dict[str, str] = {}
        self.submission: FormSubmission | None = None

        self._response_fields = {
            spec.id: spec
            for page in self.layout.pages
            for spec in page
            if spec.collects_response
        }

    @property
    def page_count(self) -> int:
        return self.layout.page_count

    @property
    def current_page(self) -> list[FieldSpec]:
        if not self.layout.pages:
            return []
        return self.layout.pages[self.page_index]

    @property
    def is_first_page(self) -> bool:
        return self.page_index == 0

    @property
    def is_last_page(self) -> bool:
        return self.page_index >= self.page_count - 1

    @property
    def is_submitted(self) -> bool:
        return self.state == FillState.SUBMITTED

    @property
    def progress(self) -> float:
        """Fraction of pages completed, 1.0 once submitted."""
        if self.is_submitted or self.page_count == 0:
            return 1.0 if self.is_submitted else 0.0
        return self.page_index / self.page_count

    @property
    def thank_you(self) -> FieldSpec | None:
        return self.layout.thank_you

    def set_value(self, field_id: str, value: Value | None) -> None:
        """Record a value for a field; None clears it.

        Raises:
            StructuralError: If the session is submitted or the id does not
                name a response-bearing field of this form
        """
        self._require_filling()
        if field_id not in self._response_fields:
            raise StructuralError(f"Field {field_id} does not accept a value")
        if value is None:
            self.values.pop(field_id, None)
        else:
            self.values[field_id] = value
        self.errors.pop(field_id, None)

    def set_values(self, values: Mapping[str, Value | None]) -> None:
        for field_id, value in values.items():
            self.set_value(field_id, value)

    def validate_current_page(self) -> bool:
        """Validate the active page and store its field errors."""
        self.errors = validate_page(self.current_page, self.values)
        return not self.errors

    def advance(self) -> bool:
        """Move to the next page if the current one validates.

        Returns:
            True if the page index moved forward. The last page never
            advances; use submit() there.
        """
        self._require_filling()
        if self.is_last_page:
            return False
        if not self.validate_current_page():
            logger.debug(
                "Page %d has %d invalid fields", self.page_index, len(self.errors)
            )
            return False
        self.page_index += 1
        return True

    def retreat(self) -> bool:
        """Move back one page without validation; stays put on the first page."""
        self._require_filling()
        self.errors = {}
        if self.is_first_page:
            return False
        self.page_index -= 1
        return True

    def submit(self) -> FormSubmission | None:
        """Validate the last page and hand the responses to the recorder.

        Returns:
            The submission, or None when the last page has invalid fields

        Raises:
            StructuralError: If called before the last page or after submit
            CollaboratorError: If recording fails; the session keeps its
                values and stays on the last page so submit can be retried
        """
        self._require_filling()
        if not self.is_last_page:
            raise StructuralError(
                f"Cannot submit from page {self.page_index + 1} of {self.page_count}"
            )
        if not self.validate_current_page():
            return None

        responses = build_responses(self._response_fields.values(), self.values)
        spam_analysis = None
        if self.spam_scorer is not None:
            spam_analysis = self.spam_scorer.analyze(
                responses, self.definition.elements
            )

        submission_id = str(ULID())
        if self.recorder is not None:
            try:
                submission_id = self.recorder.record_submission(
                    self.definition.id, responses
                )
            except CollaboratorError as e:
                logger.error(
                    "Failed to record submission for form %s: %s",
                    self.definition.id,
                    e,
                )
                raise

        self.submission = FormSubmission(
            id=submission_id,
            form_id=self.definition.id,
            responses=responses,
            submitted_at=datetime.now(UTC).isoformat(),
            spam_analysis=spam_analysis,
        )
        self.state = FillState.SUBMITTED
        logger.info(
            "Submitted form %s with %d responses", self.definition.id, len(responses)
        )
        return self.submission

    def restart(self) -> "FillSession":
        """Start a fresh session for the same form."""
        return FillSession(self.definition, self.recorder, self.spam_scorer)

    def _require_filling(self) -> None:
        if self.state != FillState.FILLING:
            raise StructuralError("Form has already been submitted")
