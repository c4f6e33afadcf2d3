"""
Unit tests for the progress calculations.
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from lifeplanner.core.models import Task
from lifeplanner.progress.metrics import (
    active_days,
    bucket_tasks_by_day,
    completion_rate,
    consistency_rate,
    count_days,
    goal_progress,
    resolve_timeframe,
    tasks_in_range,
    week_bounds,
)

DONE = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_task(title, day=None, completed=False):
    return Task(
        id=title, life_area_id="a1", title=title,
        scheduled_date=day, completed_at=DONE if completed else None,
    )


class TestRates:
    """Tests for completion and consistency rates."""

    def test_completion_rate(self):
        tasks = [make_task("a", completed=True), make_task("b"), make_task("c", completed=True), make_task("d")]
        assert completion_rate(tasks) == 50.0

    def test_completion_rate_empty_is_zero(self):
        """No tasks gives 0, never a division error."""
        assert completion_rate([]) == 0.0
        assert goal_progress([]) == 0.0

    def test_goal_progress(self):
        tasks = [make_task("a", completed=True), make_task("b"), make_task("c")]
        assert goal_progress(tasks) == pytest.approx(100 / 3)

    def test_consistency_rate(self):
        assert consistency_rate(3, 30) == 10.0
        assert consistency_rate(0, 0) == 0.0


class TestRanges:
    """Tests for day counting and range filtering."""

    def test_count_days_calendar_week(self):
        """A calendar week counts the span rounded up plus one."""
        start = datetime(2024, 6, 2)
        end = datetime(2024, 6, 8, 23, 59, 59, 999999)
        assert count_days(start, end) == 8

    def test_count_days_same_instant(self):
        moment = datetime(2024, 6, 2, 9, 0)
        assert count_days(moment, moment) == 1

    def test_tasks_in_range_uses_scheduled_midnight(self):
        start = datetime(2024, 6, 1)
        end = datetime(2024, 6, 30, 23, 59, 59)
        tasks = [
            make_task("before", date(2024, 5, 31)),
            make_task("first", date(2024, 6, 1)),
            make_task("last", date(2024, 6, 30)),
            make_task("after", date(2024, 7, 1)),
            make_task("unscheduled"),
        ]
        assert [t.title for t in tasks_in_range(tasks, start, end)] == ["first", "last"]

    def test_rolling_window_excludes_partial_first_day(self):
        """With a mid-day start the first day's midnight is outside the range."""
        start = datetime(2024, 3, 1, 15, 0)
        end = datetime(2024, 6, 1, 15, 0)
        tasks = [make_task("edge", date(2024, 3, 1)), make_task("next", date(2024, 3, 2))]
        assert [t.title for t in tasks_in_range(tasks, start, end)] == ["next"]

    def test_aware_range(self):
        """Scheduled days are placed in the range's timezone."""
        tz = timezone(timedelta(hours=-4))
        start = datetime(2024, 6, 1, tzinfo=tz)
        end = datetime(2024, 6, 1, 23, 59, tzinfo=tz)
        assert len(tasks_in_range([make_task("x", date(2024, 6, 1))], start, end)) == 1

    def test_active_days(self):
        tasks = [
            make_task("a", date(2024, 6, 1)),
            make_task("b", date(2024, 6, 1)),
            make_task("c", date(2024, 6, 3)),
        ]
        assert active_days(tasks) == {date(2024, 6, 1), date(2024, 6, 3)}

    def test_bucket_tasks_by_day(self):
        """Only days with tasks appear, in calendar order."""
        tasks = [
            make_task("late", date(2024, 6, 3), completed=True),
            make_task("early", date(2024, 6, 1)),
            make_task("early2", date(2024, 6, 1), completed=True),
        ]
        buckets = bucket_tasks_by_day(tasks, datetime(2024, 6, 1), datetime(2024, 6, 7, 23, 59))
        assert [b.date for b in buckets] == ["2024-06-01", "2024-06-03"]
        assert (buckets[0].completed, buckets[0].total) == (1, 2)
        assert (buckets[1].completed, buckets[1].total) == (1, 1)


class TestTimeframes:
    """Tests for timeframe presets."""

    NOW = datetime(2024, 6, 12, 15, 30)  # a Wednesday

    def test_week_starting_sunday(self):
        start, end = week_bounds(self.NOW, "sunday")
        assert start == datetime(2024, 6, 9)
        assert end == datetime(2024, 6, 15, 23, 59, 59, 999999)

    def test_week_starting_monday(self):
        start, _ = week_bounds(self.NOW, "monday")
        assert start == datetime(2024, 6, 10)

    def test_week_on_its_first_day(self):
        """A Sunday belongs to the week it starts."""
        start, _ = week_bounds(datetime(2024, 6, 9, 8, 0), "sunday")
        assert start == datetime(2024, 6, 9)

    def test_unknown_weekday(self):
        with pytest.raises(ValueError):
            week_bounds(self.NOW, "funday")

    def test_month(self):
        start, end = resolve_timeframe("month", self.NOW)
        assert start == datetime(2024, 6, 1)
        assert end == datetime(2024, 6, 30, 23, 59, 59, 999999)

    def test_month_february_leap_year(self):
        _, end = resolve_timeframe("month", datetime(2024, 2, 10))
        assert end.date() == date(2024, 2, 29)

    def test_year(self):
        start, end = resolve_timeframe("year", self.NOW)
        assert start == datetime(2024, 1, 1)
        assert end == datetime(2024, 12, 31, 23, 59, 59, 999999)

    def test_rolling_windows(self):
        start, end = resolve_timeframe("3months", self.NOW)
        assert (start, end) == (datetime(2024, 3, 12, 15, 30), self.NOW)
        start, _ = resolve_timeframe("halfyear", self.NOW)
        assert start == datetime(2023, 12, 12, 15, 30)

    def test_unknown_timeframe(self):
        with pytest.raises(ValueError, match="Unknown timeframe"):
            resolve_timeframe("decade", self.NOW)
