# view_state.py
from datetime import date
from typing import Iterable, List, Optional

from models import Habit, LogEntry


class ViewState:
    """Cached copy of the service data for the selected month.

    Only the sync controller writes to it, and only with data from a
    completed service call. ``logs`` always belongs to (year, month).
    """

    def __init__(self, year: int, month: int):
        self._check_period(year, month)
        self.year = year
        self.month = month
        self.habits: List[Habit] = []
        self.logs: List[LogEntry] = []

    @classmethod
    def for_today(cls, today: Optional[date] = None) -> "ViewState":
        today = today or date.today()
        return cls(today.year, today.month)

    @staticmethod
    def _check_period(year: int, month: int):
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be in 1..12, got {month}.")
        if year < 1:
            raise ValueError(f"Year must be positive, got {year}.")

    @property
    def period(self):
        return self.year, self.month

    # -------- Period --------
    def set_period(self, year: int, month: int):
        """Select a new month. Logs from the old month are dropped until reloaded."""
        self._check_period(year, month)
        if (year, month) != self.period:
            self.logs = []
        self.year = year
        self.month = month

    # -------- Wholesale replacement --------
    def replace_habits(self, habits: Iterable[Habit]):
        self.habits = list(habits)

    def replace_logs(self, logs: Iterable[LogEntry]):
        self.logs = list(logs)

    # -------- Lookups --------
    def is_completed(self, habit_id, date_str: str) -> bool:
        # any-match: duplicate entries from the service must not hide a completion
        return any(
            log.habit_id == habit_id and log.date == date_str and log.completed
            for log in self.logs
        )

    def find_habit(self, habit_id) -> Optional[Habit]:
        return next((h for h in self.habits if h.id == habit_id), None)

    @property
    def habit_count(self) -> int:
        return len(self.habits)
