"""Services for the form pipeline."""

from .analytics_service import summarize_submissions
from .collaborators import CollaboratorError, FormNotFoundError
from .edit_history import EditHistory, StructuralError, apply_command
from .edit_session import EditSession
from .field_factory import accept_suggestions, create_field, duplicate_field
from .field_validation import build_responses, validate_field, validate_page
from .fill_session import FillSession, FillState
from .page_segmentation import PageLayout, segment_pages
from .spam_service import SpamScorer, analyze

__all__ = [
    "CollaboratorError",
    "FormNotFoundError",
    "EditHistory",
    "EditSession",
    "StructuralError",
    "apply_command",
    "accept_suggestions",
    "create_field",
    "duplicate_field",
    "build_responses",
    "validate_field",
    "validate_page",
    "FillSession",
    "FillState",
    "PageLayout",
    "segment_pages",
    "SpamScorer",
    "analyze",
    "summarize_submissions",
]
