"""Submission analytics summary models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TimeRange(str, Enum):
    """Reporting window for submission analytics."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int:
        return {"week": 7, "month": 30, "year": 365}[self.value]


class SubmissionSummary(BaseModel):
    """Counts derived from a form's submissions over one reporting window."""

    time_range: TimeRange = Field(..., alias="timeRange")
    total_submissions: int = Field(
        ..., ge=0, alias="totalSubmissions", description="Submissions in the window"
    )
    submissions_today: int = Field(..., ge=0, alias="submissionsToday")
    submissions_this_week: int = Field(
        ..., ge=0, alias="submissionsThisWeek", description="Last 7 days"
    )
    submissions_by_day: dict[str, int] = Field(
        default_factory=dict,
        alias="submissionsByDay",
        description="Window submissions per YYYY-MM-DD day",
    )
    response_distribution: dict[str, dict[str, int]] = Field(
        default_factory=dict,
        alias="responseDistribution",
        description="Per choice field, how often each option was chosen",
    )
    skipped: int = Field(
        default=0, ge=0, description="Submissions with an unreadable timestamp"
    )

    model_config = ConfigDict(populate_by_name=True)
