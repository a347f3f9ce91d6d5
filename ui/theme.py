"""Shared visual style helpers for the Tk UI (dark dashboard palette)."""

import tkinter as tk

# Palette
BG = "#09090b"
CARD_BG = "#18181b"
BORDER = "#27272a"
TEXT = "#fafafa"
MUTED = "#a1a1aa"
ACCENT = "#3b82f6"       # completion blue
ACCENT_DARK = "#2563eb"
SUCCESS = "#22c55e"      # daily line, checked cells
WEEKLY = "#f97316"       # weekly bars
DANGER = "#ef4444"
EMPTY_CELL = "#1f2937"

# Typography
FONT_FAMILY = "Helvetica"
TITLE = (FONT_FAMILY, 18, "bold")
HEADING = (FONT_FAMILY, 12, "bold")
BODY = (FONT_FAMILY, 10)
SMALL = (FONT_FAMILY, 8)
BUTTON = (FONT_FAMILY, 10, "bold")
STAT = (FONT_FAMILY, 22, "bold")

# Grid geometry (px)
NAME_COL_WIDTH = 200


def card(parent):
    """Flat dark panel with a one pixel border."""
    return tk.Frame(parent, bg=CARD_BG, highlightbackground=BORDER, highlightthickness=1)


def heading_label(parent, text, font=TITLE):
    return tk.Label(parent, text=text, bg=parent.cget("bg"), fg=TEXT, font=font)


def muted_label(parent, text):
    return tk.Label(parent, text=text, bg=parent.cget("bg"), fg=MUTED, font=BODY, anchor="w")


def _flat_button(parent, text, command, bg, active_bg, padx):
    return tk.Button(
        parent,
        text=text,
        command=command,
        bg=bg,
        fg=TEXT,
        activebackground=active_bg,
        activeforeground=TEXT,
        relief="flat",
        bd=0,
        font=BUTTON,
        padx=padx,
        pady=5,
        cursor="hand2",
    )


def primary_button(parent, text, command):
    return _flat_button(parent, text, command, ACCENT, ACCENT_DARK, padx=14)


def danger_button(parent, text, command, compact=False):
    # compact: the "×" delete buttons in the habit list
    return _flat_button(parent, text, command, DANGER, DANGER, padx=6 if compact else 10)


def ghost_button(parent, text, command):
    """Outlined button for navigation between screens."""
    btn = _flat_button(parent, text, command, CARD_BG, BORDER, padx=12)
    btn.configure(fg=ACCENT, relief="solid", bd=1)
    return btn
