import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from aggregator import compute_stats
from dates import parse_date
from models import Habit, LogEntry
from service_client import HabitServiceClient


class HabitStore:
    """In-memory data behind the fake habit service."""

    def __init__(self):
        self.next_id = 1
        self.habits = []
        self.logs = []

    def add(self, name):
        habit = {"id": self.next_id, "name": name}
        self.next_id += 1
        self.habits.append(habit)
        return habit

    def delete(self, habit_id):
        before = len(self.habits)
        self.habits = [h for h in self.habits if h["id"] != habit_id]
        self.logs = [l for l in self.logs if l["habit_id"] != habit_id]
        return len(self.habits) != before

    def clear(self):
        self.habits = []
        self.logs = []

    def log(self, habit_id, date_str, completed=True):
        self.logs.append({"habit_id": habit_id, "date": date_str, "completed": completed})

    def toggle(self, habit_id, date_str):
        done = any(
            l["habit_id"] == habit_id and l["date"] == date_str and l["completed"] for l in self.logs
        )
        self.logs = [l for l in self.logs if not (l["habit_id"] == habit_id and l["date"] == date_str)]
        if not done:
            self.log(habit_id, date_str)
        return not done

    def logs_for(self, year, month):
        return [l for l in self.logs if parse_date(l["date"])[:2] == (year, month)]

    def habit_models(self):
        return [Habit.from_dict(h) for h in self.habits]

    def log_models(self, year, month):
        return [LogEntry.from_dict(l) for l in self.logs_for(year, month)]

    def stats(self, year, month):
        return compute_stats(self.habit_models(), self.log_models(year, month), year, month)


@pytest.fixture
def store():
    s = HabitStore()
    run = s.add("Run")
    s.add("Read")
    s.log(run["id"], "2026-03-05")
    s.log(run["id"], "2026-04-02")
    return s


# ---------- aiohttp fake of the remote service ----------
def build_service_app(store, failing=(), html=(), delay=0.0, stats_payload=None):
    """failing: route names answering 500; html: route names answering a 200
    HTML page; delay: seconds every handler waits; stats_payload: fixed body
    for the stats route."""

    def route(name):
        def wrap(handler):
            async def inner(request):
                if delay:
                    await asyncio.sleep(delay)
                if name in failing:
                    return web.json_response({"error": "boom"}, status=500)
                if name in html:
                    return web.Response(text="<html>maintenance</html>", content_type="text/html")
                return await handler(request)
            return inner
        return wrap

    @route("list_habits")
    async def list_habits(request):
        return web.json_response(store.habits)

    @route("add_habit")
    async def add_habit(request):
        body = await request.json()
        name = (body.get("name") or "").strip()
        if not name:
            return web.json_response({"error": "name required"}, status=400)
        return web.json_response(store.add(name), status=201)

    @route("delete_habit")
    async def delete_habit(request):
        if not store.delete(int(request.match_info["habit_id"])):
            return web.json_response({"error": "not found"}, status=404)
        return web.json_response({"status": "deleted"})

    @route("clear_all")
    async def clear_all(request):
        store.clear()
        return web.json_response({"status": "cleared"})

    @route("list_logs")
    async def list_logs(request):
        year, month = int(request.match_info["year"]), int(request.match_info["month"])
        # SQLite-style 0/1 flags
        return web.json_response(
            [dict(l, completed=int(l["completed"])) for l in store.logs_for(year, month)]
        )

    @route("get_stats")
    async def get_stats(request):
        if stats_payload is not None:
            return web.json_response(stats_payload)
        year, month = int(request.match_info["year"]), int(request.match_info["month"])
        return web.json_response(store.stats(year, month).to_dict())

    @route("toggle")
    async def toggle(request):
        body = await request.json()
        return web.json_response({"completed": store.toggle(body["habit_id"], body["date"])})

    app = web.Application()
    app.add_routes([
        web.get("/api/habits", list_habits),
        web.post("/api/habits", add_habit),
        web.post("/api/habits/clear", clear_all),
        web.delete("/api/habits/{habit_id}", delete_habit),
        web.get("/api/logs/{year}/{month}", list_logs),
        web.get("/api/stats/{year}/{month}", get_stats),
        web.post("/api/toggle", toggle),
    ])
    return app


def run_against_service(store, scenario, timeout=5.0, **app_kwargs):
    """Start the fake service, run ``scenario(client)`` against it, tear down."""

    async def runner():
        server = TestServer(build_service_app(store, **app_kwargs))
        await server.start_server()
        client = HabitServiceClient(f"http://{server.host}:{server.port}", timeout=timeout)
        try:
            return await scenario(client)
        finally:
            await client.close()
            await server.close()

    return asyncio.run(runner())


@pytest.fixture
def against_service(store):
    def run(scenario, **kwargs):
        return run_against_service(store, scenario, **kwargs)
    return run


# ---------- in-memory client for controller tests ----------
class FakeClient:
    """Same surface as HabitServiceClient, backed by a HabitStore.

    ``failing`` holds operation names that answer with an error; ``gates``
    maps an operation (or an (operation, *args) tuple) to an asyncio.Event
    the call waits on before answering.
    """

    def __init__(self, store):
        self.store = store
        self.calls = []
        self.failing = set()
        self.gates = {}

    async def _enter(self, op, *args):
        self.calls.append((op, *args))
        gate = self.gates.get((op, *args)) or self.gates.get(op)
        if gate is not None:
            await gate.wait()
        if op in self.failing:
            return f"{op} failed with status 500."
        return None

    async def list_habits(self):
        error = await self._enter("list_habits")
        return (None, error) if error else (self.store.habit_models(), None)

    async def list_logs(self, year, month):
        error = await self._enter("list_logs", year, month)
        return (None, error) if error else (self.store.log_models(year, month), None)

    async def get_stats(self, year, month):
        error = await self._enter("get_stats", year, month)
        return (None, error) if error else (self.store.stats(year, month), None)

    async def add_habit(self, name):
        error = await self._enter("add_habit", name)
        return (None, error) if error else (self.store.add(name), None)

    async def delete_habit(self, habit_id):
        error = await self._enter("delete_habit", habit_id)
        if error:
            return None, error
        self.store.delete(habit_id)
        return {"status": "deleted"}, None

    async def clear_all(self):
        error = await self._enter("clear_all")
        if error:
            return None, error
        self.store.clear()
        return {"status": "cleared"}, None

    async def toggle(self, habit_id, date_str):
        error = await self._enter("toggle", habit_id, date_str)
        return (None, error) if error else (self.store.toggle(habit_id, date_str), None)


@pytest.fixture
def fake_client(store):
    return FakeClient(store)
