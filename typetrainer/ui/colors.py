"""Terminal color pairs and their curses setup."""

from __future__ import annotations

import curses
from typing import Dict, Tuple


class TerminalColors:
    """curses color pair numbers, one per text style."""

    CORRECT = 1
    FAULT = 2
    PROMPT = 3
    INFO = 4
    DIM = 5

    # pair -> (foreground, background); -1 keeps the terminal default.
    PALETTE: Dict[int, Tuple[int, int]] = {
        CORRECT: (curses.COLOR_BLACK, curses.COLOR_GREEN),
        FAULT: (curses.COLOR_BLACK, curses.COLOR_RED),
        PROMPT: (curses.COLOR_YELLOW, -1),
        INFO: (curses.COLOR_CYAN, -1),
        DIM: (curses.COLOR_WHITE, -1),
    }


# Style names used by typetrainer.ui.render mapped to color pairs.
STYLE_PAIRS: Dict[str, int] = {
    "correct": TerminalColors.CORRECT,
    "fault": TerminalColors.FAULT,
    "pending": TerminalColors.PROMPT,
    "info": TerminalColors.INFO,
    "dim": TerminalColors.DIM,
}


def init_colors() -> bool:
    """Register the palette. Returns False on terminals without color."""
    if not curses.has_colors():
        return False
    curses.start_color()
    try:
        curses.use_default_colors()
    except curses.error:
        return False
    for pair, (fg, bg) in TerminalColors.PALETTE.items():
        curses.init_pair(pair, fg, bg)
    return True


def style_attr(style: str, colors_enabled: bool) -> int:
    """curses attribute for a render style name."""
    if not colors_enabled:
        return curses.A_REVERSE if style == "fault" else curses.A_NORMAL
    pair = STYLE_PAIRS.get(style)
    if pair is None:
        return curses.A_NORMAL
    return curses.color_pair(pair)
