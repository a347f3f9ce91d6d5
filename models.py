# models.py
from dataclasses import dataclass, field
from typing import Dict, Optional

from dates import WEEK_BUCKETS


@dataclass(frozen=True)
class Habit:
    id: int
    name: str

    @classmethod
    def from_dict(cls, raw: dict) -> "Habit":
        return cls(id=raw["id"], name=str(raw["name"]))


@dataclass(frozen=True)
class LogEntry:
    habit_id: int
    date: str   # canonical "YYYY-MM-DD"
    completed: bool = True

    @classmethod
    def from_dict(cls, raw: dict) -> "LogEntry":
        # SQLite-backed services report completed as 0/1
        return cls(
            habit_id=raw["habit_id"],
            date=str(raw["date"]),
            completed=bool(raw.get("completed", False)),
        )


def _int_keys(mapping: dict) -> Dict[int, int]:
    return {int(k): int(v) for k, v in (mapping or {}).items()}


@dataclass(frozen=True)
class StatsSnapshot:
    """Completion counts for one month.

    daily is dense (every day of the month present); weekly covers buckets 1..5.
    """

    total_completed: int
    total_possible: int
    daily: Dict[int, int] = field(default_factory=dict)
    weekly: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict, days: Optional[int] = None) -> "StatsSnapshot":
        """Parse a stats payload; ``days`` fills the daily map for days 1..days."""
        weekly = _int_keys(raw.get("weekly"))
        for bucket in WEEK_BUCKETS:
            weekly.setdefault(bucket, 0)
        daily = _int_keys(raw.get("daily"))
        for day in range(1, (days or 0) + 1):
            daily.setdefault(day, 0)
        return cls(
            total_completed=int(raw["total_completed"]),
            total_possible=int(raw["total_possible"]),
            daily=dict(sorted(daily.items())),
            weekly=dict(sorted(weekly.items())),
        )

    def to_dict(self) -> dict:
        return {
            "total_completed": self.total_completed,
            "total_possible": self.total_possible,
            "daily": dict(self.daily),
            "weekly": dict(self.weekly),
        }
