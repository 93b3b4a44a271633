"""Dashboard view helpers.

Everything here is presentation logic computed from the API payload: streaks,
category cards and report labels. No I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from core.domain.dashboard import (
    CategoryCardView,
    CategorySummary,
    Dashboard,
    DashboardView,
    FormattedReport,
    GeneratedBy,
    RecentReport,
    StreakData,
)

CATEGORY_STYLES: dict[str, dict[str, str]] = {
    "family": {"color": "bg-red-500", "color_hex": "#FF6B6B", "icon": "home"},
    "friends": {"color": "bg-cyan-500", "color_hex": "#4ECDC4", "icon": "team"},
    "pets": {"color": "bg-yellow-500", "color_hex": "#FFD93D", "icon": "appstore"},
    "body": {"color": "bg-green-500", "color_hex": "#6BCB77", "icon": "heart"},
    "mind": {"color": "bg-blue-500", "color_hex": "#4D96FF", "icon": "brain"},
    "passions": {"color": "bg-pink-500", "color_hex": "#FF6BCB", "icon": "fire"},
}

GENERATED_BY_STYLES: dict[GeneratedBy, tuple[str, str]] = {
    GeneratedBy.USER: ("Manual", "blue"),
    GeneratedBy.SYSTEM: ("Automatic", "green"),
}

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def compute_streak(note_dates: Iterable[date], today: date | None = None) -> StreakData:
    """Current and best run of consecutive note days.

    The current streak stays alive until the end of the day after the last
    note, so an unwritten "today" does not reset it yet.
    """

    today = today or date.today()
    days = sorted({d for d in note_dates if d <= today})
    if not days:
        return StreakData()

    best = run = 1
    for previous, current in zip(days, days[1:]):
        run = run + 1 if current - previous == timedelta(days=1) else 1
        best = max(best, run)

    last = days[-1]
    current_streak = 0
    if today - last <= timedelta(days=1):
        # `run` is the length of the trailing run ending at `last`.
        current_streak = run

    return StreakData(
        days=current_streak,
        last_note_date=last,
        is_current_day=last == today,
        best_streak=best,
    )


def category_style(name: str) -> dict[str, str]:
    return CATEGORY_STYLES.get(name.lower(), CATEGORY_STYLES["family"])


def progress_percent(note_count: int, daily_goal: int) -> int:
    if daily_goal <= 0:
        return 0
    return min(100, round(note_count * 100 / daily_goal))


def category_card(category: CategorySummary) -> CategoryCardView:
    style = category_style(category.name)
    return CategoryCardView(
        id=category.id,
        name=category.name,
        icon=style["icon"],
        color=style["color"],
        color_hex=style["color_hex"],
        note_count=category.note_count,
        daily_goal=category.daily_goal,
        progress_percent=progress_percent(category.note_count, category.daily_goal),
        is_active=category.is_active,
        last_note=category.last_note,
    )


def _parse_iso(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_report_date(value: str, now: datetime | None = None) -> tuple[str, str]:
    """Return `(formatted, relative)` for an ISO timestamp.

    Unparseable input is returned unchanged in both slots.
    """

    parsed = _parse_iso(value)
    if parsed is None:
        return value, value

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    diff_days = (now - parsed) // timedelta(days=1)

    formatted = f"{parsed:%B} {parsed.day}, {parsed.year}"
    if diff_days == 0:
        relative = "Today"
    elif diff_days == 1:
        relative = "Yesterday"
    elif 1 < diff_days < 7:
        relative = f"{diff_days} days ago"
    elif 7 <= diff_days < 30:
        weeks = diff_days // 7
        relative = f"{weeks} week{'s' if weeks > 1 else ''} ago"
    else:
        relative = formatted
    return formatted, relative


def format_report(report: RecentReport, now: datetime | None = None) -> FormattedReport:
    formatted, relative = format_report_date(report.created_at, now)
    label, badge = GENERATED_BY_STYLES[report.generated_by]
    return FormattedReport(
        report=report,
        formatted_date=formatted,
        relative_time=relative,
        generated_by_label=label,
        generated_by_badge_color=badge,
    )


def build_dashboard_view(
    dashboard: Dashboard,
    *,
    today: date | None = None,
    now: datetime | None = None,
) -> DashboardView:
    now = now or datetime.now(timezone.utc)
    return DashboardView(
        summary=dashboard.summary,
        streak=compute_streak(dashboard.summary.note_dates, today or now.date()),
        categories=[category_card(c) for c in dashboard.summary.categories],
        reports=[format_report(r, now) for r in dashboard.recent_reports],
        fetched_at=now,
    )


def is_valid_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value))


def is_valid_past_date(value: str, today: date | None = None) -> bool:
    """True for a strict `YYYY-MM-DD` string that is today or earlier."""

    if not _DAY_RE.match(value):
        return False
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return False
    return parsed <= (today or date.today())
