"""Tests for dashboard view helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

import pytest

from core.domain.dashboard import CategorySummary, Dashboard, GeneratedBy, RecentReport
from core.services.dashboard import (
    build_dashboard_view,
    category_card,
    category_style,
    compute_streak,
    format_report,
    format_report_date,
    is_valid_past_date,
    is_valid_uuid,
    progress_percent,
)

TODAY = date(2024, 3, 10)
NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def d(day: int, month: int = 3) -> date:
    return date(2024, month, day)


class TestComputeStreak:
    def test_no_notes(self) -> None:
        streak = compute_streak([], TODAY)
        assert streak.days == 0
        assert streak.best_streak == 0
        assert streak.last_note_date is None
        assert streak.is_current_day is False

    def test_run_ending_today(self) -> None:
        streak = compute_streak([d(8), d(9), d(10)], TODAY)
        assert streak.days == 3
        assert streak.is_current_day is True
        assert streak.best_streak == 3

    def test_run_ending_yesterday_still_counts(self) -> None:
        streak = compute_streak([d(7), d(8), d(9)], TODAY)
        assert streak.days == 3
        assert streak.is_current_day is False
        assert streak.last_note_date == d(9)

    def test_broken_streak(self) -> None:
        streak = compute_streak([d(1), d(2), d(3), d(4), d(7), d(8)], TODAY)
        assert streak.days == 0
        assert streak.best_streak == 4
        assert streak.last_note_date == d(8)

    def test_duplicates_and_order_ignored(self) -> None:
        streak = compute_streak([d(10), d(9), d(10), d(9), d(8)], TODAY)
        assert streak.days == 3

    def test_future_dates_ignored(self) -> None:
        streak = compute_streak([d(10), d(11), d(12)], TODAY)
        assert streak.days == 1
        assert streak.last_note_date == TODAY

    def test_across_month_boundary(self) -> None:
        streak = compute_streak([date(2024, 2, 28), date(2024, 2, 29), d(1)], d(1))
        assert streak.days == 3


class TestCategoryCards:
    @pytest.mark.parametrize(("count", "goal", "percent"), [(0, 0, 0), (3, 0, 0), (1, 4, 25), (3, 2, 100), (1, 3, 33)])
    def test_progress_percent(self, count: int, goal: int, percent: int) -> None:
        assert progress_percent(count, goal) == percent

    def test_known_category_style(self) -> None:
        assert category_style("MIND")["icon"] == "brain"

    def test_unknown_category_falls_back_to_family(self) -> None:
        assert category_style("Work") == category_style("family")

    def test_card(self) -> None:
        card = category_card(CategorySummary(id="c1", name="Body", note_count=2, daily_goal=4))
        assert card.icon == "heart"
        assert card.color_hex == "#6BCB77"
        assert card.progress_percent == 50


class TestReportDates:
    @pytest.mark.parametrize(
        ("created", "relative"),
        [
            ("2024-03-10T08:00:00Z", "Today"),
            ("2024-03-09T08:00:00Z", "Yesterday"),
            ("2024-03-06T08:00:00Z", "4 days ago"),
            ("2024-03-03T08:00:00Z", "1 week ago"),
            ("2024-02-20T08:00:00Z", "2 weeks ago"),
            ("2024-01-01T08:00:00Z", "January 1, 2024"),
        ],
    )
    def test_relative(self, created: str, relative: str) -> None:
        assert format_report_date(created, NOW)[1] == relative

    def test_formatted(self) -> None:
        assert format_report_date("2024-03-10T08:00:00Z", NOW)[0] == "March 10, 2024"

    def test_unparseable(self) -> None:
        assert format_report_date("yesterday-ish", NOW) == ("yesterday-ish", "yesterday-ish")

    def test_format_report_labels(self) -> None:
        report = RecentReport(id="r1", created_at="2024-03-10T08:00:00Z", generated_by=GeneratedBy.USER)
        formatted = format_report(report, NOW)
        assert formatted.generated_by_label == "Manual"
        assert formatted.relative_time == "Today"


class TestValidators:
    def test_uuid(self) -> None:
        assert is_valid_uuid("0b9f1c52-4a57-4c1e-9d1a-0a5c2f6b7e11") is True
        assert is_valid_uuid("0B9F1C52-4A57-4C1E-9D1A-0A5C2F6B7E11") is True
        assert is_valid_uuid("not-a-uuid") is False

    def test_past_date(self) -> None:
        assert is_valid_past_date("2024-03-10", TODAY) is True
        assert is_valid_past_date("2024-03-01", TODAY) is True
        assert is_valid_past_date("2024-03-11", TODAY) is False
        assert is_valid_past_date("2024-3-1", TODAY) is False
        assert is_valid_past_date("2024-02-30", TODAY) is False
        assert is_valid_past_date("20240301", TODAY) is False


class TestDashboardView:
    def test_build(self, dashboard_payload: dict[str, Any]) -> None:
        dashboard = Dashboard.model_validate(dashboard_payload)
        view = build_dashboard_view(dashboard, today=TODAY, now=NOW)
        assert view.streak.days == 3
        assert [c.icon for c in view.categories] == ["brain", "appstore"]
        assert view.categories[0].progress_percent == 100
        assert view.reports[0].generated_by_label == "Automatic"
        assert view.fetched_at == NOW

    def test_empty_payload(self) -> None:
        view = build_dashboard_view(Dashboard.model_validate({}), now=NOW)
        assert view.streak.days == 0
        assert view.categories == []
        assert view.reports == []
