"""Split a flat field list into navigable pages."""

import logging
from dataclasses import dataclass, field

from models.form import FieldSpec, FieldType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageLayout:
    """Pages derived from a field list plus the terminal thank-you element."""

    pages: list[list[FieldSpec]] = field(default_factory=list)
    thank_you: FieldSpec | None = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page_labels(self) -> list[str]:
        return [f"Page {number}" for number in range(1, len(self.pages) + 1)]

    def page_index_of(self, field_id: str) -> int | None:
        """Get the index of the page holding a field, or None."""
        for index, page in enumerate(self.pages):
            if any(f.id == field_id for f in page):
                return index
        return None


def segment_pages(fields: list[FieldSpec] | tuple[FieldSpec, ...]) -> PageLayout:
    """Segment fields into pages at each pagebreak.

    Single pass. Empty pages (leading, trailing or adjacent pagebreaks) are
    dropped. Thank-you elements never appear in page content; the first one
    found is kept as the terminal message and later ones are ignored.
    """
    pages: list[list[FieldSpec]] = []
    current: list[FieldSpec] = []
    thank_you = None

    for spec in fields:
        if spec.type == FieldType.PAGEBREAK:
            if current:
                pages.append(current)
                current = []
        elif spec.type == FieldType.THANKYOU:
            if thank_you is None:
                thank_you = spec
        else:
            current.append(spec)

    if current:
        pages.append(current)

    logger.debug("Segmented %d fields into %d pages", len(fields), len(pages))
    return PageLayout(pages=pages, thank_you=thank_you)
