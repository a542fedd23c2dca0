"""Shared constants for the form pipeline."""

# Spam confidence at or above which a submission is flagged.
SPAM_THRESHOLD: float = 0.5

DEFAULT_SPAM_KEYWORDS: tuple[str, ...] = (
    "viagra",
    "casino",
    "lottery",
    "winner",
    "prize",
    "free money",
    "crypto giveaway",
    "click here",
)

# Field keys or labels containing these words are expected to hold links
URL_FRIENDLY_KEYWORDS: tuple[str, ...] = ("website", "url", "link", "homepage")

# None means unbounded edit history
DEFAULT_HISTORY_DEPTH: int | None = None

DEFAULT_FORM_STYLE: dict[str, str] = {
    "backgroundColor": "#ffffff",
    "textColor": "#000000",
    "buttonColor": "#3b82f6",
    "borderRadius": "0.5rem",
    "fontFamily": "Inter, system-ui, sans-serif",
}

DEFAULT_SUBMIT_MESSAGE: str = "Thank you for your submission!"
