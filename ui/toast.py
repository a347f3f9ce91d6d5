import tkinter as tk

from config import TOAST_MS
from ui import theme


class Toast:
    """Transient message pinned to the bottom of a window."""

    def __init__(self, root: tk.Misc):
        self.root = root
        self.label = tk.Label(
            root,
            bg=theme.BORDER,
            fg=theme.TEXT,
            font=theme.BODY,
            padx=16,
            pady=8,
        )
        self._job = None

    def show(self, message: str, duration_ms: int = TOAST_MS):
        self.label.configure(text=message)
        self.label.place(relx=0.5, rely=1.0, y=-24, anchor="s")
        self.label.lift()
        if self._job is not None:
            self.root.after_cancel(self._job)
        self._job = self.root.after(duration_ms, self.hide)

    def hide(self):
        self._job = None
        self.label.place_forget()
