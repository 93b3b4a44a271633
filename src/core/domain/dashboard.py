"""Dashboard models.

Two families live here:
- The wire contract of `GET /api/dashboard` (tolerant: unknown keys ignored).
- View models computed client-side (streaks, category cards, formatted reports).
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LastNote(BaseModel):
    model_config = ConfigDict(extra="ignore")

    date: str
    title: str | None = None


class CategorySummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = Field(..., min_length=1)
    note_count: int = Field(default=0, ge=0)
    daily_goal: int = Field(default=0, ge=0)
    is_active: bool = True
    last_note: LastNote | None = None


class DashboardSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total_notes: int = Field(default=0, ge=0)
    categories: list[CategorySummary] = Field(default_factory=list)
    note_dates: list[date] = Field(
        default_factory=list,
        description="Days on which at least one note was written (any order, duplicates allowed).",
    )


class GeneratedBy(str, Enum):
    USER = "user"
    SYSTEM = "system"


class RecentReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str | None = None
    created_at: str
    generated_by: GeneratedBy = GeneratedBy.SYSTEM
    period_start: date | None = None
    period_end: date | None = None


class Dashboard(BaseModel):
    """Body of `GET /api/dashboard`."""

    model_config = ConfigDict(extra="ignore")

    summary: DashboardSummary = Field(default_factory=DashboardSummary)
    recent_reports: list[RecentReport] = Field(default_factory=list)


class DashboardQuery(BaseModel):
    since: date | None = None

    @field_validator("since")
    @classmethod
    def _not_in_future(cls, value: date | None) -> date | None:
        if value is not None and value > date.today():
            raise ValueError("since must be today or a past date")
        return value

    def as_params(self) -> dict[str, str]:
        return {"since": self.since.isoformat()} if self.since else {}


class StreakData(BaseModel):
    model_config = ConfigDict(frozen=True)

    days: int = Field(default=0, ge=0)
    last_note_date: date | None = None
    is_current_day: bool = False
    best_streak: int = Field(default=0, ge=0)


class CategoryCardView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    color: str
    color_hex: str
    note_count: int
    daily_goal: int
    progress_percent: int = Field(..., ge=0, le=100)
    is_active: bool
    last_note: LastNote | None = None


class FormattedReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    report: RecentReport
    formatted_date: str
    relative_time: str
    generated_by_label: str
    generated_by_badge_color: str


class DashboardView(BaseModel):
    """Everything the dashboard screen renders, computed once per fetch."""

    summary: DashboardSummary
    streak: StreakData
    categories: list[CategoryCardView] = Field(default_factory=list)
    reports: list[FormattedReport] = Field(default_factory=list)
    fetched_at: datetime
