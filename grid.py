"""Projection of the view state into a calendar grid (habits x days)."""

from dataclasses import dataclass
from typing import List, Optional

from dates import days_in_month, format_date, weekday_label
from models import Habit
from view_state import ViewState


@dataclass(frozen=True)
class DayHeader:
    day: int
    weekday: str
    date_str: str


@dataclass(frozen=True)
class GridCell:
    day: int
    date_str: str
    checked: bool


@dataclass(frozen=True)
class GridRow:
    habit: Habit
    cells: List[GridCell]


@dataclass(frozen=True)
class GridDescription:
    year: int
    month: int
    headers: List[DayHeader]
    rows: List[GridRow]

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def checked_count(self) -> int:
        return sum(cell.checked for row in self.rows for cell in row.cells)

    def cell(self, habit_id, day: int) -> Optional[GridCell]:
        for row in self.rows:
            if row.habit.id == habit_id:
                return row.cells[day - 1] if 1 <= day <= len(row.cells) else None
        return None


def build_grid(view_state: ViewState) -> GridDescription:
    """Rebuild the whole grid from the current snapshot; rows keep service order."""
    year, month = view_state.period
    headers = [
        DayHeader(day=d, weekday=weekday_label(year, month, d), date_str=format_date(year, month, d))
        for d in range(1, days_in_month(year, month) + 1)
    ]

    rows = []
    for habit in view_state.habits:
        cells = [
            GridCell(
                day=header.day,
                date_str=header.date_str,
                checked=view_state.is_completed(habit.id, header.date_str),
            )
            for header in headers
        ]
        rows.append(GridRow(habit=habit, cells=cells))

    return GridDescription(year=year, month=month, headers=headers, rows=rows)
