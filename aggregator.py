"""Monthly completion statistics computed from habits and logs.

Produces the same shape as the service's ``/api/stats/{year}/{month}``
payload so either source can drive the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from dates import WEEK_BUCKETS, days_in_month, parse_date, week_bucket
from models import Habit, LogEntry, StatsSnapshot

PERCENT_PLACEHOLDER = "—"
MIN_CHART_MAX = 10


def _completed_pairs(logs: Iterable[LogEntry], habit_ids: set, year: int, month: int) -> set:
    """(habit_id, day) pairs of known habits with at least one completed entry in the month."""
    pairs = set()
    for log in logs:
        if not log.completed or log.habit_id not in habit_ids:
            continue
        try:
            log_year, log_month, day = parse_date(log.date)
        except ValueError:
            continue
        if (log_year, log_month) == (year, month):
            pairs.add((log.habit_id, day))
    return pairs


def compute_stats(
    habits: Sequence[Habit], logs: Iterable[LogEntry], year: int, month: int
) -> StatsSnapshot:
    """Daily, weekly and monthly totals for (year, month).

    Duplicate log entries for the same habit and day count once; logs of
    habits not in ``habits`` are ignored, so total_completed <= total_possible.
    """
    day_count = days_in_month(year, month)
    pairs = _completed_pairs(logs, {h.id for h in habits}, year, month)

    daily = {day: 0 for day in range(1, day_count + 1)}
    for _habit_id, day in pairs:
        daily[day] += 1

    weekly = {bucket: 0 for bucket in WEEK_BUCKETS}
    for day, count in daily.items():
        weekly[week_bucket(day)] += count

    return StatsSnapshot(
        total_completed=len(pairs),
        total_possible=day_count * len(habits),
        daily=daily,
        weekly=weekly,
    )


def completion_percentage(stats: StatsSnapshot) -> Optional[float]:
    """Percent complete rounded to one decimal, or None when nothing is possible."""
    if stats.total_possible <= 0:
        return None
    return round(stats.total_completed / stats.total_possible * 100, 1)


def format_percentage(value: Optional[float]) -> str:
    if value is None:
        return PERCENT_PLACEHOLDER
    return f"{value:.1f}%"


def best_week(stats: StatsSnapshot) -> int:
    """Bucket with the most completions; ties go to the earliest bucket."""
    best, best_count = WEEK_BUCKETS[0], None
    for bucket in WEEK_BUCKETS:
        count = stats.weekly.get(bucket, 0)
        if best_count is None or count > best_count:
            best, best_count = bucket, count
    return best


@dataclass(frozen=True)
class ChartSeries:
    daily: List[int]
    weekly: List[int]
    doughnut: List[int]   # [completed, incomplete]
    y_max: int


def chart_series(stats: StatsSnapshot, habit_count: int) -> ChartSeries:
    """Series for the daily line, weekly bar and completion doughnut charts."""
    incomplete = max(stats.total_possible - stats.total_completed, 0)
    return ChartSeries(
        daily=[stats.daily.get(day, 0) for day in range(1, max(stats.daily, default=0) + 1)],
        weekly=[stats.weekly.get(bucket, 0) for bucket in WEEK_BUCKETS],
        doughnut=[stats.total_completed, incomplete],
        y_max=max(MIN_CHART_MAX, habit_count),
    )
