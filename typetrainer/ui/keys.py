"""Translation of raw curses keys into session input events."""

from __future__ import annotations

import curses
from typing import Optional, Union

from typetrainer.core.session import EventKind, InputEvent, State

ESC = "\x1b"
CTRL_C = "\x03"
CTRL_P = "\x10"
CTRL_R = "\x12"

_BACKSPACE_KEYS = {curses.KEY_BACKSPACE, 127, 8, "\x7f", "\b"}
_ENTER_KEYS = {curses.KEY_ENTER, 10, 13, "\n", "\r"}


def translate(key: Union[str, int], state: State) -> Optional[InputEvent]:
    """Map a key from ``get_wch()`` to an event, or None to ignore it.

    Ctrl+C stops a session that is running or paused and quits otherwise.
    """
    if key == CTRL_C:
        if state in (State.RUNNING, State.PAUSING):
            return InputEvent(EventKind.STOP)
        return InputEvent(EventKind.QUIT)
    if key == ESC:
        return InputEvent(EventKind.QUIT)
    if key == CTRL_P:
        return InputEvent(EventKind.PAUSE)
    if key == CTRL_R:
        return InputEvent(EventKind.RESTART)
    if key in _BACKSPACE_KEYS:
        return InputEvent(EventKind.BACKSPACE)
    if key in _ENTER_KEYS:
        return InputEvent(EventKind.ENTER)
    if isinstance(key, str) and len(key) == 1 and key.isprintable():
        return InputEvent.typed(key)
    return None
