# ui/dashboard.py (grid screen)
import tkinter as tk
import tkinter.messagebox as mbox
from datetime import date

from config import YEAR_RANGE
from dates import month_name
from sync_controller import Command, DashboardUpdate
from ui import theme


class Dashboard(tk.Frame):
    def __init__(self, parent, controller):
        super().__init__(parent, bg=theme.BG)
        self.controller = controller
        self.cells = {}  # (habit_id, date_str) -> Label

        # Header
        header = tk.Frame(self, bg=theme.BG)
        header.pack(fill="x", padx=16, pady=(14, 8))
        theme.heading_label(header, "Habit Tracker Pro").pack(side="left")
        theme.ghost_button(header, "Analytics", lambda: controller.show("Analytics")).pack(
            side="right"
        )

        year, month = controller.view_state.period
        self.month_var = tk.StringVar(value=month_name(month))
        self.year_var = tk.StringVar(value=str(year))
        self._month_names = [month_name(m) for m in range(1, 13)]
        years = [str(y) for y in range(YEAR_RANGE[0], YEAR_RANGE[1] + 1)]
        if str(year) not in years:
            years.insert(0, str(year))
        tk.OptionMenu(header, self.year_var, *years, command=self._period_changed).pack(
            side="right", padx=6
        )
        tk.OptionMenu(
            header, self.month_var, *self._month_names, command=self._period_changed
        ).pack(side="right", padx=6)

        body = tk.Frame(self, bg=theme.BG)
        body.pack(fill="both", expand=True, padx=16, pady=(0, 14))

        # Sidebar
        sidebar = theme.card(body)
        sidebar.pack(side="left", fill="y", padx=(0, 12))
        theme.heading_label(sidebar, "Habits", theme.HEADING).pack(anchor="w", padx=12, pady=(12, 0))
        self.total_label = theme.muted_label(sidebar, "0 habits")
        self.total_label.pack(anchor="w", padx=12)

        add_row = tk.Frame(sidebar, bg=theme.CARD_BG)
        add_row.pack(fill="x", padx=12, pady=8)
        self.name_entry = tk.Entry(
            add_row,
            bg=theme.BG,
            fg=theme.TEXT,
            insertbackground=theme.TEXT,
            relief="solid",
            bd=1,
            font=theme.BODY,
        )
        self.name_entry.pack(side="left", fill="x", expand=True)
        self.name_entry.bind("<Return>", lambda _e: self.add_habit())
        theme.primary_button(add_row, "Add", self.add_habit).pack(side="left", padx=(6, 0))

        self.sidebar_list = tk.Frame(sidebar, bg=theme.CARD_BG)
        self.sidebar_list.pack(fill="both", expand=True, padx=12)
        theme.danger_button(sidebar, "Clear all", self.clear_all).pack(
            anchor="w", padx=12, pady=12
        )

        # Grid (horizontally scrollable)
        grid_card = theme.card(body)
        grid_card.pack(side="left", fill="both", expand=True)
        self.canvas = tk.Canvas(grid_card, bg=theme.CARD_BG, highlightthickness=0)
        xbar = tk.Scrollbar(grid_card, orient="horizontal", command=self.canvas.xview)
        ybar = tk.Scrollbar(grid_card, orient="vertical", command=self.canvas.yview)
        self.canvas.configure(xscrollcommand=xbar.set, yscrollcommand=ybar.set)
        xbar.pack(side="bottom", fill="x")
        ybar.pack(side="right", fill="y")
        self.canvas.pack(fill="both", expand=True)
        self.grid_frame = tk.Frame(self.canvas, bg=theme.CARD_BG)
        self.canvas.create_window((0, 0), window=self.grid_frame, anchor="nw")
        self.grid_frame.bind(
            "<Configure>",
            lambda _e: self.canvas.configure(scrollregion=self.canvas.bbox("all")),
        )

        controller.sync.on_render(self.render)
        controller.sync.on_cell(self.update_cell)

    # ---------- Rendering ----------
    def render(self, update: DashboardUpdate):
        self._render_sidebar(update.habits)
        self._render_grid(update)

    def _render_sidebar(self, habits):
        for w in self.sidebar_list.winfo_children():
            w.destroy()
        count = len(habits)
        self.total_label.configure(text=f"{count} habit{'' if count == 1 else 's'}")

        if not habits:
            theme.muted_label(self.sidebar_list, "No habits yet").pack(anchor="w", pady=4)
            return

        for h in habits:
            row = tk.Frame(self.sidebar_list, bg=theme.CARD_BG)
            row.pack(fill="x", pady=2)
            tk.Label(
                row, text=f"• {h.name}", anchor="w", bg=theme.CARD_BG, fg=theme.TEXT, font=theme.BODY
            ).pack(side="left", fill="x", expand=True)
            theme.danger_button(
                row, "×", lambda hid=h.id, name=h.name: self.delete_habit(hid, name), compact=True
            ).pack(side="right")

    def _render_grid(self, update: DashboardUpdate):
        for w in self.grid_frame.winfo_children():
            w.destroy()
        self.cells.clear()
        grid = update.grid

        tk.Label(
            self.grid_frame, text="Habits", anchor="w", bg=theme.CARD_BG, fg=theme.MUTED, font=theme.HEADING
        ).grid(row=0, column=0, sticky="w", padx=(8, 4))
        self.grid_frame.columnconfigure(0, minsize=theme.NAME_COL_WIDTH)
        today = date.today().isoformat()
        for col, header in enumerate(grid.headers, start=1):
            fg = theme.ACCENT if header.date_str == today else theme.MUTED
            tk.Label(
                self.grid_frame,
                text=f"{header.weekday}\n{header.day}",
                bg=theme.CARD_BG,
                fg=fg,
                font=theme.SMALL,
                width=3,
            ).grid(row=0, column=col, pady=(4, 6))

        for r, row in enumerate(grid.rows, start=1):
            tk.Label(
                self.grid_frame,
                text=f"• {row.habit.name}",
                anchor="w",
                bg=theme.CARD_BG,
                fg=theme.TEXT,
                font=theme.BODY,
            ).grid(row=r, column=0, sticky="ew", padx=(8, 4))
            for col, cell in enumerate(row.cells, start=1):
                label = tk.Label(self.grid_frame, width=2, height=1, cursor="hand2", bd=0)
                self._style_cell(label, cell.checked)
                label.grid(row=r, column=col, padx=1, pady=1)
                label.bind(
                    "<Button-1>",
                    lambda _e, hid=row.habit.id, ds=cell.date_str: self.toggle(hid, ds),
                )
                self.cells[(row.habit.id, cell.date_str)] = label

    def _style_cell(self, label: tk.Label, checked: bool):
        label.configure(bg=theme.SUCCESS if checked else theme.EMPTY_CELL)

    def update_cell(self, habit_id, date_str: str, completed: bool):
        label = self.cells.get((habit_id, date_str))
        if label is not None:
            self._style_cell(label, completed)

    # ---------- Commands ----------
    def _period_changed(self, _value=None):
        month = self._month_names.index(self.month_var.get()) + 1
        self.controller.dispatch(Command.CHANGE_PERIOD, year=int(self.year_var.get()), month=month)

    def toggle(self, habit_id, date_str: str):
        self.controller.dispatch(Command.TOGGLE, habit_id=habit_id, date_str=date_str)

    def add_habit(self):
        task = self.controller.dispatch(Command.ADD_HABIT, name=self.name_entry.get())
        task.add_done_callback(self._habit_added)

    def _habit_added(self, task):
        if task.cancelled() or task.exception() is not None:
            return
        if task.result().ok:
            self.name_entry.delete(0, "end")

    def delete_habit(self, habit_id, name: str):
        if not mbox.askyesno("Delete habit?", f'Delete habit "{name}"?'):
            return
        self.controller.dispatch(Command.DELETE_HABIT, habit_id=habit_id)

    def clear_all(self):
        if not mbox.askyesno("Clear all?", "This will delete all habits and logs. Continue?"):
            return
        self.controller.dispatch(Command.CLEAR_ALL)
