"""Async client for the habit-tracking HTTP service used by the dashboard."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from config import DEFAULT_SERVICE_URL, REQUEST_TIMEOUT_S
from dates import days_in_month
from models import Habit, LogEntry, StatsSnapshot

logger = logging.getLogger(__name__)


class HabitServiceClient:
    """Every call returns ``(value, error)``; transport and status failures never raise."""

    def __init__(
        self,
        base_url: str = DEFAULT_SERVICE_URL,
        timeout: float = REQUEST_TIMEOUT_S,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    # ---------- Session lifecycle ----------
    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self):
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    # ---------- Low-level send helper ----------
    async def _send_json(self, method: str, path: str, payload: Optional[dict] = None):
        url = f"{self.base_url}{path}"
        try:
            async with self._get_session().request(method, url, json=payload) as resp:
                if resp.status >= 400:
                    return None, f"{method} {path} failed with status {resp.status}."
                if resp.content_type != "application/json":
                    return None, None
                return await resp.json(), None
        except asyncio.TimeoutError:
            return None, f"Timed out contacting {url}."
        except aiohttp.ContentTypeError as exc:
            return None, f"Malformed response from {url}: {exc.message}"
        except aiohttp.ClientError as exc:
            return None, f"Service error on {url}: {exc}"
        except ValueError as exc:
            return None, f"Malformed response from {url}: {exc}"

    async def _fetch(self, path: str, expected: type, parse):
        """GET and parse a JSON body; anything other than an ``expected`` payload is an error."""
        data, error = await self._send_json("GET", path)
        if not error and not isinstance(data, expected):
            error = f"Expected a JSON {expected.__name__} from {path}, got {type(data).__name__}."
        if error:
            logger.warning(error)
            return None, error
        try:
            return parse(data), None
        except (KeyError, TypeError, ValueError) as exc:
            error = f"Unexpected payload from {path}: {exc!r}"
            logger.warning(error)
            return None, error

    async def _mutate(self, method: str, path: str, payload: Optional[dict] = None):
        data, error = await self._send_json(method, path, payload)
        if error:
            logger.warning(error)
            return None, error
        # empty or non-JSON acknowledgements are fine for mutations
        return ({} if data is None else data), None

    # ---------- Reads ----------
    async def list_habits(self):
        """GET /api/habits -> (List[Habit], error)"""
        return await self._fetch(
            "/api/habits", list, lambda data: [Habit.from_dict(item) for item in data]
        )

    async def list_logs(self, year: int, month: int):
        """GET /api/logs/{year}/{month} -> (List[LogEntry], error)"""
        return await self._fetch(
            f"/api/logs/{year}/{month}",
            list,
            lambda data: [LogEntry.from_dict(item) for item in data],
        )

    async def get_stats(self, year: int, month: int):
        """GET /api/stats/{year}/{month} -> (StatsSnapshot, error)"""
        return await self._fetch(
            f"/api/stats/{year}/{month}",
            dict,
            lambda data: StatsSnapshot.from_dict(data, days=days_in_month(year, month)),
        )

    # ---------- Mutations ----------
    async def add_habit(self, name: str):
        return await self._mutate("POST", "/api/habits", {"name": name})

    async def delete_habit(self, habit_id):
        return await self._mutate("DELETE", f"/api/habits/{habit_id}")

    async def clear_all(self):
        return await self._mutate("POST", "/api/habits/clear")

    async def toggle(self, habit_id, date_str: str):
        """POST /api/toggle -> (completed: bool, error). The service decides the new state."""
        data, error = await self._mutate(
            "POST", "/api/toggle", {"habit_id": habit_id, "date": date_str}
        )
        if error:
            return None, error
        if not isinstance(data, dict) or "completed" not in data:
            error = "Toggle response did not report a completed state."
            logger.warning(error)
            return None, error
        return bool(data["completed"]), None
