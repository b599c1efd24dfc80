from __future__ import annotations

import curses
import logging
from typing import List

from typetrainer.core.session import SessionEngine, SessionSnapshot, State
from typetrainer.ui.colors import init_colors, style_attr
from typetrainer.ui.keys import translate
from typetrainer.ui.render import (
    gauge,
    prompt_fragments,
    stat_lines,
    state_hints,
    typed_text,
    wrap_fragments,
)

logger = logging.getLogger(__name__)

# Milliseconds to wait for a key before redrawing and checking the timer.
TICK_MS = 250

TITLE = " Type Trainer "


class TerminalUI:
    """curses front-end: draws snapshots and feeds keys into the engine."""

    def __init__(self, engine: SessionEngine, tick_ms: int = TICK_MS) -> None:
        self._engine = engine
        self._tick_ms = tick_ms
        self._colors = False

    def run(self) -> None:
        """Block until the session is quit. Restores the terminal afterwards."""
        curses.wrapper(self._main)

    def _main(self, stdscr: "curses.window") -> None:
        self._colors = init_colors()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.keypad(True)
        stdscr.timeout(self._tick_ms)
        curses.raw()

        while not self._engine.should_quit():
            self._engine.check_timer()
            self._draw(stdscr, self._engine.snapshot())
            try:
                key = stdscr.get_wch()
            except curses.error:
                continue
            if key == curses.KEY_RESIZE:
                continue
            event = translate(key, self._engine.state)
            if event is not None:
                self._engine.update(event)

    def _draw(self, stdscr: "curses.window", snapshot: SessionSnapshot) -> None:
        stdscr.erase()
        height, width = stdscr.getmaxyx()
        if height < 12 or width < 30:
            self._put(stdscr, 0, 0, "Terminal too small", "fault")
            stdscr.refresh()
            return

        inner = width - 4
        self._put(stdscr, 0, max(0, (width - len(TITLE)) // 2), TITLE, "info")

        row = 2
        self._put(stdscr, row, 2, f"{snapshot.state.value}", "info")
        for offset, hint in enumerate(state_hints(snapshot.state)):
            self._put(stdscr, row, 14 + offset * 20, hint, "dim")
        row += 2

        bar_width = max(10, inner - 12)
        for label, ratio in (
            ("Timer", snapshot.time_ratio),
            ("Progress", snapshot.progress_ratio),
            ("Ratio", snapshot.accuracy_ratio),
        ):
            self._put(stdscr, row, 2, f"{label:<10}", "plain")
            self._put(stdscr, row, 12, gauge(ratio, bar_width), "plain")
            row += 1
        row += 1
        for line in stat_lines(snapshot):
            self._put(stdscr, row, 2, line, "plain")
            row += 1
        row += 1

        if snapshot.state is State.FINISHED:
            self._put(stdscr, row, 2, "Session finished.", "info")
            stdscr.refresh()
            return

        self._put(stdscr, row, 2, "Prompt", "info")
        row += 1
        typed_rows = 3
        prompt_bottom = height - typed_rows - 3
        for fragments in wrap_fragments(prompt_fragments(snapshot), inner):
            if row >= prompt_bottom:
                break
            col = 2
            for text, style in fragments:
                self._put(stdscr, row, col, text, style)
                col += len(text)
            row += 1
        for upcoming in snapshot.remaining_prompts:
            if row >= prompt_bottom:
                break
            self._put(stdscr, row, 2, upcoming[:inner], "dim")
            row += 1

        row = height - typed_rows - 2
        self._put(stdscr, row, 2, "Typed:", "info")
        typed_rows_text = self._tail_rows(typed_text(snapshot) + "_", inner, typed_rows)
        for offset, line in enumerate(typed_rows_text):
            self._put(stdscr, row + 1 + offset, 2, line, "plain")
        stdscr.refresh()

    @staticmethod
    def _tail_rows(text: str, width: int, count: int) -> List[str]:
        rows = [text[i:i + width] for i in range(0, len(text), width)] or [""]
        return rows[-count:]

    def _put(self, stdscr: "curses.window", y: int, x: int, text: str, style: str) -> None:
        height, width = stdscr.getmaxyx()
        if y >= height or x >= width:
            return
        try:
            stdscr.addstr(y, x, text[: max(0, width - x - 1)], style_attr(style, self._colors))
        except curses.error:
            # Writing the bottom-right cell raises even though it succeeds.
            pass
