"""Orchestrates service calls and keeps the view state and dashboard in step.

Every mutation is remote-first: the request goes to the service and only a
successful acknowledgement triggers a full reload (habits, logs, stats) and
a full re-render. Nothing is patched locally.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from aggregator import ChartSeries, best_week, chart_series, completion_percentage, compute_stats
from config import SHORT_TOAST_MS, TOAST_MS
from grid import GridDescription, build_grid
from models import Habit, StatsSnapshot
from view_state import ViewState

logger = logging.getLogger(__name__)


class Command(Enum):
    ADD_HABIT = "add_habit"
    DELETE_HABIT = "delete_habit"
    TOGGLE = "toggle"
    CLEAR_ALL = "clear_all"
    CHANGE_PERIOD = "change_period"


class MutationState(Enum):
    IDLE = "idle"
    PENDING = "pending"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class MutationResult:
    command: Command
    state: MutationState = MutationState.IDLE
    error: Optional[str] = None
    completed: Optional[bool] = None   # toggle only, as reported by the service
    transitions: List[MutationState] = field(default_factory=list)

    def advance(self, state: MutationState):
        self.state = state
        self.transitions.append(state)

    def fail(self, error: str):
        self.error = error
        self.advance(MutationState.FAILED)

    @property
    def ok(self) -> bool:
        return self.state is MutationState.APPLIED


@dataclass(frozen=True)
class DashboardUpdate:
    """Everything the presentation layer needs for one full render."""

    grid: GridDescription
    stats: StatsSnapshot
    habits: Tuple[Habit, ...]
    percentage: Optional[float]
    best_week: int
    series: ChartSeries
    stats_source: str   # "service" or "local"


class SyncController:
    def __init__(self, client, view_state: ViewState):
        self.client = client
        self.view_state = view_state
        self.last_update: Optional[DashboardUpdate] = None
        self.in_flight = 0
        self._generation = 0
        self._render_listeners: List[Callable[[DashboardUpdate], None]] = []
        self._cell_listeners: List[Callable[[object, str, bool], None]] = []
        self._notify_listeners: List[Callable[[str, int], None]] = []

    # ---------- Listeners ----------
    def on_render(self, callback):
        self._render_listeners.append(callback)
        return callback

    def on_cell(self, callback):
        self._cell_listeners.append(callback)
        return callback

    def on_notify(self, callback):
        self._notify_listeners.append(callback)
        return callback

    def _notify(self, message: str, duration_ms: int = TOAST_MS):
        for callback in self._notify_listeners:
            callback(message, duration_ms)

    @property
    def state(self) -> MutationState:
        return MutationState.PENDING if self.in_flight else MutationState.IDLE

    @property
    def generation(self) -> int:
        return self._generation

    # ---------- Reload ----------
    async def reload(self):
        """Fetch habits, logs and stats for the selected month, then render.

        Returns ``(applied, error)``. A reload overtaken by a newer one is
        dropped without touching the view state: ``(False, None)``.
        """
        self._generation += 1
        generation = self._generation
        year, month = self.view_state.period

        (habits, habits_err), (logs, logs_err), (stats, stats_err) = await asyncio.gather(
            self.client.list_habits(),
            self.client.list_logs(year, month),
            self.client.get_stats(year, month),
        )

        if generation != self._generation:
            logger.debug(
                "Dropping reload %d for %d-%02d, latest is %d",
                generation, year, month, self._generation,
            )
            return False, None

        error = habits_err or logs_err
        if error:
            logger.warning("Reload for %d-%02d failed: %s", year, month, error)
            self._notify("Could not load habits", TOAST_MS)
            return False, error

        self.view_state.replace_habits(habits)
        self.view_state.replace_logs(logs)

        source = "service"
        if stats_err:
            logger.warning("Stats unavailable (%s), computing locally", stats_err)
            stats = compute_stats(self.view_state.habits, self.view_state.logs, year, month)
            source = "local"

        self._render(stats, source)
        return True, None

    def _render(self, stats: StatsSnapshot, source: str):
        update = DashboardUpdate(
            grid=build_grid(self.view_state),
            stats=stats,
            habits=tuple(self.view_state.habits),
            percentage=completion_percentage(stats),
            best_week=best_week(stats),
            series=chart_series(stats, self.view_state.habit_count),
            stats_source=source,
        )
        self.last_update = update
        for callback in self._render_listeners:
            callback(update)

    # ---------- Mutations ----------
    async def _send(self, result: MutationResult, request):
        result.advance(MutationState.PENDING)
        self.in_flight += 1
        try:
            return await request
        finally:
            self.in_flight -= 1

    async def _finish(self, result: MutationResult, error, ok_message, fail_message):
        if error:
            logger.warning("%s failed: %s", result.command.value, error)
            result.fail(error)
            self._notify(fail_message, TOAST_MS)
        else:
            logger.info("%s applied", result.command.value)
            result.advance(MutationState.APPLIED)
            await self.reload()
            if ok_message:
                self._notify(ok_message, TOAST_MS)
        result.transitions.append(MutationState.IDLE)
        return result

    async def add_habit(self, name: str) -> MutationResult:
        result = MutationResult(Command.ADD_HABIT)
        name = (name or "").strip()
        if not name:
            logger.debug("Ignoring add_habit with an empty name")
            result.fail("Habit name is required.")
            result.transitions.append(MutationState.IDLE)
            return result
        _data, error = await self._send(result, self.client.add_habit(name))
        return await self._finish(result, error, "Habit added", "Failed to add habit")

    async def delete_habit(self, habit_id) -> MutationResult:
        result = MutationResult(Command.DELETE_HABIT)
        _data, error = await self._send(result, self.client.delete_habit(habit_id))
        return await self._finish(result, error, "Habit removed", "Failed to remove habit")

    async def clear_all(self) -> MutationResult:
        """Delete every habit and log. Callers confirm with the user first."""
        result = MutationResult(Command.CLEAR_ALL)
        _data, error = await self._send(result, self.client.clear_all())
        return await self._finish(result, error, "All habits reset", "Failed to reset habits")

    async def toggle(self, habit_id, date_str: str) -> MutationResult:
        result = MutationResult(Command.TOGGLE)
        completed, error = await self._send(result, self.client.toggle(habit_id, date_str))
        if not error:
            result.completed = completed
            for callback in self._cell_listeners:
                callback(habit_id, date_str, completed)
            self._notify("Marked complete" if completed else "Marked incomplete", SHORT_TOAST_MS)
        return await self._finish(result, error, None, "Failed to update habit")

    async def change_period(self, year: int, month: int) -> MutationResult:
        result = MutationResult(Command.CHANGE_PERIOD)
        self.view_state.set_period(year, month)
        result.advance(MutationState.PENDING)
        _applied, error = await self.reload()
        if error:
            result.fail(error)
        else:
            result.advance(MutationState.APPLIED)
        result.transitions.append(MutationState.IDLE)
        return result

    async def dispatch(self, command: Command, **payload) -> MutationResult:
        handlers = {
            Command.ADD_HABIT: self.add_habit,
            Command.DELETE_HABIT: self.delete_habit,
            Command.TOGGLE: self.toggle,
            Command.CLEAR_ALL: self.clear_all,
            Command.CHANGE_PERIOD: self.change_period,
        }
        return await handlers[command](**payload)
