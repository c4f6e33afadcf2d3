"""
Pure progress calculations over already-fetched tasks.

Nothing here touches storage. Rates are percentages in [0, 100] and are
0.0 (never NaN) when there is nothing to divide by.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Set, Tuple

from dateutil.relativedelta import relativedelta, MO, TU, WE, TH, FR, SA, SU

from lifeplanner.core.dates import to_day_key
from lifeplanner.core.models import Task

DAY = timedelta(days=1)

TIMEFRAMES = ("week", "month", "3months", "halfyear", "year")

_WEEKDAYS = {
    "monday": MO, "tuesday": TU, "wednesday": WE, "thursday": TH,
    "friday": FR, "saturday": SA, "sunday": SU,
}


@dataclass
class DayBucket:
    """Tasks scheduled on one calendar day"""
    date: str
    tasks: List[Task] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.tasks)

    @property
    def completed(self) -> int:
        return sum(1 for t in self.tasks if t.is_completed)


def completion_rate(tasks: Iterable[Task]) -> float:
    """Percentage of tasks with completed_at set"""
    tasks = list(tasks)
    if not tasks:
        return 0.0
    done = sum(1 for t in tasks if t.is_completed)
    return done / len(tasks) * 100


def consistency_rate(active_days: int, total_days: int) -> float:
    """Percentage of days in a range that had at least one task"""
    if total_days <= 0:
        return 0.0
    return active_days / total_days * 100


def count_days(start: datetime, end: datetime) -> int:
    """Days covered by [start, end]: ceil(span in days) + 1"""
    return math.ceil((end - start) / DAY) + 1


def _day_start(day: date, like: datetime) -> datetime:
    """Midnight of a calendar day in the same timezone as `like`"""
    return datetime.combine(day, time.min, tzinfo=like.tzinfo)


def tasks_in_range(tasks: Iterable[Task], start: datetime, end: datetime) -> List[Task]:
    """
    Scheduled tasks whose day falls in [start, end].

    A scheduled day counts from its midnight, so with a rolling window
    the first (partial) day is only included when start is midnight.
    """
    return [
        t for t in tasks
        if t.scheduled_date is not None
        and start <= _day_start(t.scheduled_date, start) <= end
    ]


def active_days(tasks: Iterable[Task]) -> Set[date]:
    """Distinct scheduled days"""
    return {t.scheduled_date for t in tasks if t.scheduled_date is not None}


def bucket_tasks_by_day(tasks: Iterable[Task], start: datetime, end: datetime) -> List[DayBucket]:
    """
    Group the tasks in [start, end] by scheduled day.

    Walks count_days(start, end) calendar days from start's day; days
    without tasks are left out of the result.
    """
    by_day: Dict[date, List[Task]] = defaultdict(list)
    for task in tasks_in_range(tasks, start, end):
        by_day[task.scheduled_date].append(task)

    buckets = []
    first_day = start.date()
    for offset in range(count_days(start, end)):
        day = first_day + timedelta(days=offset)
        if by_day.get(day):
            buckets.append(DayBucket(date=to_day_key(day), tasks=by_day[day]))
    return buckets


def week_bounds(now: datetime, week_starts_on: str = "sunday") -> Tuple[datetime, datetime]:
    """First and last instant of the calendar week containing now"""
    try:
        first_weekday = _WEEKDAYS[week_starts_on.lower()]
    except KeyError:
        raise ValueError(f"Unknown weekday: {week_starts_on}") from None
    start = now + relativedelta(weekday=first_weekday(-1), hour=0, minute=0, second=0, microsecond=0)
    end = start + relativedelta(days=6, hour=23, minute=59, second=59, microsecond=999999)
    return start, end


def resolve_timeframe(timeframe: str, now: datetime, week_starts_on: str = "sunday") -> Tuple[datetime, datetime]:
    """
    Turn a timeframe preset into concrete [start, end] instants.

    'week', 'month' and 'year' snap to calendar boundaries; '3months'
    and 'halfyear' are rolling windows ending at now.
    """
    midnight = dict(hour=0, minute=0, second=0, microsecond=0)
    if timeframe == "week":
        return week_bounds(now, week_starts_on)
    if timeframe == "month":
        start = now + relativedelta(day=1, **midnight)
        return start, start + relativedelta(months=1, microseconds=-1)
    if timeframe == "3months":
        return now - relativedelta(months=3), now
    if timeframe == "halfyear":
        return now - relativedelta(months=6), now
    if timeframe == "year":
        start = now + relativedelta(month=1, day=1, **midnight)
        return start, start + relativedelta(years=1, microseconds=-1)
    raise ValueError(f"Unknown timeframe: {timeframe} (expected one of {', '.join(TIMEFRAMES)})")


def goal_progress(tasks: Iterable[Task]) -> float:
    """Percentage of a goal's tasks that are completed"""
    return completion_rate(tasks)
