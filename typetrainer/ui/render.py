"""Turns session snapshots into styled text fragments.

Nothing here touches curses, so the layout logic can be tested directly.
A fragment is a ``(text, style)`` pair; styles are the names in
``typetrainer.ui.colors.STYLE_PAIRS`` plus ``"plain"``.
"""

from __future__ import annotations

from typing import List, Tuple

from typetrainer.core.content import PromptMode
from typetrainer.core.session import SessionSnapshot, State

Fragment = Tuple[str, str]

OVERFLOW_CHAR = "█"

_HINTS = {
    State.WAITING: ["Start:   Type", "Quit:    Ctrl+C / Esc"],
    State.RUNNING: ["Pause:   Ctrl+P", "Restart: Ctrl+R", "Stop:    Ctrl+C"],
    State.PAUSING: ["Resume:  Type", "Restart: Ctrl+R", "Stop:    Ctrl+C"],
    State.FINISHED: ["Restart: Ctrl+R", "Quit:    Ctrl+C / Esc"],
    State.QUITTING: [],
}


def state_hints(state: State) -> List[str]:
    """Key bindings that do something in ``state``."""
    return list(_HINTS[state])


def _merge(fragments: List[Fragment]) -> List[Fragment]:
    merged: List[Fragment] = []
    for text, style in fragments:
        if merged and merged[-1][1] == style:
            merged[-1] = (merged[-1][0] + text, style)
        else:
            merged.append((text, style))
    return merged


def prompt_fragments(snapshot: SessionSnapshot) -> List[Fragment]:
    """The current prompt, highlighted against what has been typed.

    Typed positions are marked correct or wrong, characters typed past the
    end show up as red blocks and the untyped rest keeps the prompt style.
    """
    if snapshot.state not in (State.WAITING, State.RUNNING, State.PAUSING):
        return []
    prompt = snapshot.current_prompt
    if not snapshot.settings.highlight_enabled:
        return [(prompt, "pending")] if prompt else []

    fragments: List[Fragment] = [
        (prompt[i], "correct" if ok else "fault") for i, ok in enumerate(snapshot.marks)
    ]
    if snapshot.overflow:
        fragments.append((OVERFLOW_CHAR * snapshot.overflow, "fault"))
    elif len(snapshot.typed) < len(prompt):
        fragments.append((prompt[len(snapshot.typed):], "pending"))
    return _merge(fragments)


def typed_text(snapshot: SessionSnapshot) -> str:
    """What to show in the typing area; nothing in blind mode."""
    if snapshot.settings.blind_mode:
        return ""
    if snapshot.state not in (State.WAITING, State.RUNNING, State.PAUSING):
        return ""
    return snapshot.typed


def gauge(ratio: float, width: int, fill: str = "━", empty: str = "─") -> str:
    """A horizontal bar ``width`` cells wide, filled to ``ratio``."""
    if width <= 0:
        return ""
    ratio = max(0.0, min(1.0, ratio))
    filled = int(round(ratio * width))
    return fill * filled + empty * (width - filled)


def stat_lines(snapshot: SessionSnapshot) -> List[str]:
    if snapshot.settings.prompt_mode is PromptMode.RANDOM:
        prompts = f"{snapshot.prompts_done} done"
    else:
        prompts = f"{snapshot.prompts_done}/{snapshot.prompts_total}"
    return [
        f"Prompts   {prompts}",
        f"Time      {snapshot.time_label}",
        f"Accuracy  {snapshot.accuracy_ratio * 100:5.1f}%",
        f"Speed     {snapshot.wpm} WPM",
        f"Correct {snapshot.correct}  Faults {snapshot.fault}  Backspace {snapshot.backspace_uses}",
    ]


def wrap_fragments(fragments: List[Fragment], width: int) -> List[List[Fragment]]:
    """Hard-wrap fragments into rows of at most ``width`` characters."""
    rows: List[List[Fragment]] = [[]]
    used = 0
    if width <= 0:
        return rows
    for text, style in fragments:
        while text:
            room = width - used
            if room == 0:
                rows.append([])
                used = 0
                room = width
            piece, text = text[:room], text[room:]
            rows[-1].append((piece, style))
            used += len(piece)
    return rows
