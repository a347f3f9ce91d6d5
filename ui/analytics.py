import tkinter as tk

from aggregator import PERCENT_PLACEHOLDER, ChartSeries, format_percentage
from dates import month_name
from sync_controller import DashboardUpdate
from ui import theme

CHART_W = 520
CHART_H = 200
PAD = 28


class Analytics(tk.Frame):
    def __init__(self, parent, controller):
        super().__init__(parent, bg=theme.BG)
        self.controller = controller

        header = theme.card(self)
        header.pack(fill="x", padx=16, pady=(14, 10))
        head_row = tk.Frame(header, bg=theme.CARD_BG)
        head_row.pack(fill="x", padx=14, pady=12)
        self.title_label = theme.heading_label(head_row, "Analytics", theme.TITLE)
        self.title_label.pack(side="left")
        theme.ghost_button(
            head_row, "Back to grid", lambda: controller.show("Dashboard")
        ).pack(side="right")

        stats_row = tk.Frame(self, bg=theme.BG)
        stats_row.pack(fill="x", padx=16)
        self.pct_label = self._stat(stats_row, "Monthly completion")
        self.best_label = self._stat(stats_row, "Best week")

        charts = tk.Frame(self, bg=theme.BG)
        charts.pack(fill="both", expand=True, padx=16, pady=10)
        self.daily_canvas = self._chart(charts, "Daily completion", 0, 0)
        self.weekly_canvas = self._chart(charts, "Weekly completion", 0, 1)
        self.progress_canvas = self._chart(charts, "Progress", 1, 0)

        controller.sync.on_render(self.render)

    def _stat(self, parent, title: str) -> tk.Label:
        box = theme.card(parent)
        box.pack(side="left", padx=(0, 12), pady=4)
        theme.muted_label(box, title).pack(anchor="w", padx=12, pady=(10, 0))
        value = tk.Label(box, text=PERCENT_PLACEHOLDER, bg=theme.CARD_BG, fg=theme.TEXT, font=theme.STAT)
        value.pack(anchor="w", padx=12, pady=(0, 10))
        return value

    def _chart(self, parent, title: str, row: int, column: int) -> tk.Canvas:
        box = theme.card(parent)
        box.grid(row=row, column=column, padx=(0, 12), pady=6, sticky="nw")
        tk.Label(box, text=title, font=theme.HEADING, bg=theme.CARD_BG, fg=theme.TEXT).pack(
            anchor="w", padx=12, pady=(10, 0)
        )
        canvas = tk.Canvas(box, width=CHART_W, height=CHART_H, bg=theme.CARD_BG, highlightthickness=0)
        canvas.pack(padx=12, pady=8)
        return canvas

    def render(self, update: DashboardUpdate):
        grid = update.grid
        self.title_label.configure(text=f"Analytics · {month_name(grid.month)} {grid.year}")
        self.pct_label.configure(text=format_percentage(update.percentage))
        self.best_label.configure(text=f"Week {update.best_week}")
        self._draw_daily(update.series)
        self._draw_weekly(update.series)
        self._draw_progress(update.series)

    # ---------- Drawing ----------
    def _y(self, value: int, y_max: int) -> float:
        plot_h = CHART_H - 2 * PAD
        return CHART_H - PAD - plot_h * min(value, y_max) / y_max

    def _axes(self, canvas: tk.Canvas, y_max: int):
        canvas.delete("all")
        canvas.create_line(PAD, PAD, PAD, CHART_H - PAD, fill=theme.BORDER)
        canvas.create_line(PAD, CHART_H - PAD, CHART_W - PAD, CHART_H - PAD, fill=theme.BORDER)
        for tick in (0, y_max):
            canvas.create_text(
                PAD - 6, self._y(tick, y_max), text=str(tick), anchor="e", fill=theme.MUTED, font=theme.SMALL
            )

    def _draw_daily(self, series: ChartSeries):
        canvas = self.daily_canvas
        self._axes(canvas, series.y_max)
        values = series.daily
        if not values:
            return
        step = (CHART_W - 2 * PAD) / max(len(values) - 1, 1)
        points = []
        for i, value in enumerate(values):
            points.extend((PAD + i * step, self._y(value, series.y_max)))
        if len(points) >= 4:
            canvas.create_line(*points, fill=theme.SUCCESS, width=2, smooth=True)
        for i in range(0, len(values), 5):
            canvas.create_text(
                PAD + i * step, CHART_H - PAD + 10, text=str(i + 1), fill=theme.MUTED, font=theme.SMALL
            )

    def _draw_weekly(self, series: ChartSeries):
        canvas = self.weekly_canvas
        self._axes(canvas, series.y_max)
        slot = (CHART_W - 2 * PAD) / len(series.weekly)
        for i, value in enumerate(series.weekly):
            x0 = PAD + i * slot + slot * 0.2
            x1 = PAD + (i + 1) * slot - slot * 0.2
            canvas.create_rectangle(
                x0, self._y(value, series.y_max), x1, CHART_H - PAD, fill=theme.WEEKLY, width=0
            )
            canvas.create_text(
                (x0 + x1) / 2, CHART_H - PAD + 10, text=f"W{i + 1}", fill=theme.MUTED, font=theme.SMALL
            )

    def _draw_progress(self, series: ChartSeries):
        canvas = self.progress_canvas
        canvas.delete("all")
        completed, incomplete = series.doughnut
        total = completed + incomplete
        size = CHART_H - 2 * PAD
        box = (PAD, PAD, PAD + size, PAD + size)
        canvas.create_oval(*box, fill=theme.EMPTY_CELL, outline=theme.CARD_BG)
        if total and completed:
            extent = 359.999 if completed == total else 360 * completed / total
            canvas.create_arc(*box, start=90, extent=-extent, fill=theme.ACCENT, outline=theme.CARD_BG)
        hole = size * 0.3
        canvas.create_oval(
            PAD + hole, PAD + hole, PAD + size - hole, PAD + size - hole, fill=theme.CARD_BG, width=0
        )
        legend_x = PAD + size + 30
        for i, (label, color, value) in enumerate(
            (("Completed", theme.ACCENT, completed), ("Incomplete", theme.EMPTY_CELL, incomplete))
        ):
            y = PAD + 20 + i * 24
            canvas.create_rectangle(legend_x, y - 6, legend_x + 12, y + 6, fill=color, width=0)
            canvas.create_text(
                legend_x + 20, y, text=f"{label}: {value}", anchor="w", fill=theme.TEXT, font=theme.BODY
            )
