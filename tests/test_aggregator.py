from aggregator import (
    PERCENT_PLACEHOLDER,
    best_week,
    chart_series,
    completion_percentage,
    compute_stats,
    format_percentage,
)
from models import Habit, LogEntry, StatsSnapshot

RUN = Habit(id=1, name="Run")
READ = Habit(id=2, name="Read")


def test_single_completion_in_march():
    logs = [LogEntry(habit_id=1, date="2026-03-05", completed=True)]
    stats = compute_stats([RUN], logs, 2026, 3)

    assert stats.total_possible == 31
    assert stats.total_completed == 1
    assert stats.daily[5] == 1
    assert all(count == 0 for day, count in stats.daily.items() if day != 5)
    assert stats.weekly == {1: 1, 2: 0, 3: 0, 4: 0, 5: 0}
    assert best_week(stats) == 1
    assert completion_percentage(stats) == 3.2
    assert format_percentage(completion_percentage(stats)) == "3.2%"


def test_daily_map_is_dense_without_logs():
    stats = compute_stats([RUN], [], 2026, 4)
    assert list(stats.daily) == list(range(1, 31))
    assert set(stats.daily.values()) == {0}


def test_total_possible_is_habits_times_days():
    stats = compute_stats([RUN, READ], [], 2024, 2)
    assert stats.total_possible == 2 * 29


def test_no_habits_gives_placeholder_percentage():
    stats = compute_stats([], [], 2026, 3)
    assert stats.total_possible == 0
    assert completion_percentage(stats) is None
    assert format_percentage(completion_percentage(stats)) == PERCENT_PLACEHOLDER


def test_ignores_incomplete_and_other_month_logs():
    logs = [
        LogEntry(1, "2026-03-05", False),
        LogEntry(1, "2026-04-05", True),
        LogEntry(1, "2025-03-05", True),
        LogEntry(2, "garbage", True),
    ]
    stats = compute_stats([RUN, READ], logs, 2026, 3)
    assert stats.total_completed == 0
    assert sum(stats.daily.values()) == 0


def test_duplicate_entries_count_once():
    logs = [LogEntry(1, "2026-03-09", True), LogEntry(1, "2026-03-09", True)]
    stats = compute_stats([RUN], logs, 2026, 3)
    assert stats.total_completed == 1
    assert stats.daily[9] == 1
    assert stats.weekly[2] == 1


def test_weekly_sums_daily_buckets():
    logs = [
        LogEntry(1, "2026-03-07", True),
        LogEntry(2, "2026-03-08", True),
        LogEntry(1, "2026-03-29", True),
        LogEntry(2, "2026-03-31", True),
    ]
    stats = compute_stats([RUN, READ], logs, 2026, 3)
    assert stats.weekly == {1: 1, 2: 1, 3: 0, 4: 0, 5: 2}
    assert sum(stats.weekly.values()) == stats.total_completed == 4
    assert best_week(stats) == 5


def test_best_week_tie_goes_to_earliest_bucket():
    stats = StatsSnapshot(4, 62, daily={}, weekly={1: 0, 2: 2, 3: 2, 4: 0, 5: 0})
    assert best_week(stats) == 2
    empty = StatsSnapshot(0, 62, daily={}, weekly={1: 0, 2: 0, 3: 0, 4: 0, 5: 0})
    assert best_week(empty) == 1


def test_compute_stats_is_pure():
    logs = [LogEntry(1, "2026-03-05", True)]
    habits = [RUN]
    first = compute_stats(habits, logs, 2026, 3)
    second = compute_stats(habits, logs, 2026, 3)
    assert first == second
    assert logs == [LogEntry(1, "2026-03-05", True)]


def test_chart_series():
    logs = [LogEntry(1, "2026-03-05", True)]
    series = chart_series(compute_stats([RUN], logs, 2026, 3), habit_count=1)
    assert len(series.daily) == 31
    assert series.daily[4] == 1
    assert series.weekly == [1, 0, 0, 0, 0]
    assert series.doughnut == [1, 30]
    assert series.y_max == 10


def test_chart_series_scales_and_clamps():
    stats = StatsSnapshot(total_completed=5, total_possible=0, daily={1: 5}, weekly={1: 5})
    series = chart_series(stats, habit_count=14)
    assert series.y_max == 14
    assert series.doughnut == [5, 0]
    assert series.weekly == [5, 0, 0, 0, 0]


def test_logs_of_unknown_habits_are_not_counted():
    logs = [LogEntry(99, "2026-03-05", True), LogEntry(1, "2026-03-06", True)]
    stats = compute_stats([RUN], logs, 2026, 3)
    assert stats.daily[5] == 0
    assert stats.daily[6] == 1
    assert stats.total_completed == 1
    assert compute_stats([], logs, 2026, 3).total_completed == 0


def test_chart_series_places_sparse_days_by_number():
    stats = StatsSnapshot(total_completed=1, total_possible=31, daily={5: 1}, weekly={1: 1})
    assert chart_series(stats, habit_count=1).daily == [0, 0, 0, 0, 1]
