import asyncio
import logging
import sys
import tkinter as tk
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import Settings, load_settings
from service_client import HabitServiceClient
from sync_controller import Command, SyncController
from ui import theme
from ui.analytics import Analytics
from ui.dashboard import Dashboard
from ui.toast import Toast
from view_state import ViewState

logger = logging.getLogger(__name__)

PUMP_MS = 15
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", log_file=None):
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root


class App(tk.Tk):
    """Tk window driving an asyncio loop; service calls run on that loop between Tk events."""

    def __init__(self, settings: Settings):
        super().__init__()
        self.title("Habit Tracker Pro")
        self.geometry("1320x720")
        self.configure(bg=theme.BG)

        self.loop = asyncio.new_event_loop()
        self.client = HabitServiceClient(settings.service_url, settings.request_timeout)
        self.view_state = ViewState.for_today()
        self.sync = SyncController(self.client, self.view_state)
        self.toast = Toast(self)
        self.sync.on_notify(self.toast.show)

        container = tk.Frame(self, bg=theme.BG)
        container.pack(fill="both", expand=True)
        container.rowconfigure(0, weight=1)
        container.columnconfigure(0, weight=1)

        self.frames = {}
        for F in (Dashboard, Analytics):
            frame = F(parent=container, controller=self)
            self.frames[F.__name__] = frame
            frame.grid(row=0, column=0, sticky="nsew")

        self.show("Dashboard")
        self.protocol("WM_DELETE_WINDOW", self.close)
        self._pump_job = self.after(PUMP_MS, self._pump)
        self.submit(self.sync.reload())

    def show(self, name):
        self.frames[name].tkraise()

    # ---------- asyncio integration ----------
    def _pump(self):
        self.loop.call_soon(self.loop.stop)
        self.loop.run_forever()
        self._pump_job = self.after(PUMP_MS, self._pump)

    def submit(self, coro) -> asyncio.Task:
        task = self.loop.create_task(coro)
        task.add_done_callback(self._report_failure)
        return task

    def dispatch(self, command: Command, **payload) -> asyncio.Task:
        return self.submit(self.sync.dispatch(command, **payload))

    @staticmethod
    def _report_failure(task: asyncio.Task):
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task failed", exc_info=exc)

    def close(self):
        self.after_cancel(self._pump_job)
        for task in asyncio.all_tasks(self.loop):
            task.cancel()
        self.loop.run_until_complete(self.client.close())
        self.loop.close()
        self.destroy()


def main():
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_file)
    logger.info("Using habit service at %s", settings.service_url)
    App(settings).mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
