from __future__ import annotations

import enum
import logging
import math
import random
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from typetrainer.core.content import Content, PromptMode, PromptSequencer
from typetrainer.core.prompt import Counters, TypingComparator
from typetrainer.core.settings import Settings
from typetrainer.core.timer import Stopwatch

logger = logging.getLogger(__name__)

# Standard WPM convention: every five characters count as one word.
CHARS_PER_WORD = 5


class State(enum.Enum):
    WAITING = "Waiting"
    RUNNING = "Running"
    PAUSING = "Pausing"
    FINISHED = "Finished"
    QUITTING = "Quitting"


class EventKind(enum.Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    PAUSE = "pause"
    STOP = "stop"
    RESTART = "restart"
    QUIT = "quit"


TYPING_KINDS = frozenset({EventKind.CHAR, EventKind.BACKSPACE, EventKind.ENTER})


@dataclass(frozen=True)
class InputEvent:
    """One discrete input delivered to ``SessionEngine.update``."""

    kind: EventKind
    char: str = ""

    @classmethod
    def typed(cls, char: str) -> "InputEvent":
        return cls(EventKind.CHAR, char)


# (state, event) -> handler. Pairs not listed are ignored.
_TRANSITIONS: Dict[Tuple[State, EventKind], str] = {
    (State.WAITING, EventKind.CHAR): "_begin",
    (State.WAITING, EventKind.BACKSPACE): "_begin",
    (State.WAITING, EventKind.ENTER): "_begin",
    (State.WAITING, EventKind.QUIT): "_quit",
    (State.RUNNING, EventKind.CHAR): "_type_char",
    (State.RUNNING, EventKind.BACKSPACE): "_backspace",
    (State.RUNNING, EventKind.ENTER): "_press_enter",
    (State.RUNNING, EventKind.PAUSE): "_pause",
    (State.RUNNING, EventKind.STOP): "_stop",
    (State.RUNNING, EventKind.RESTART): "_restart",
    (State.RUNNING, EventKind.QUIT): "_quit",
    (State.PAUSING, EventKind.CHAR): "_begin",
    (State.PAUSING, EventKind.BACKSPACE): "_begin",
    (State.PAUSING, EventKind.ENTER): "_begin",
    (State.PAUSING, EventKind.STOP): "_stop",
    (State.PAUSING, EventKind.RESTART): "_restart",
    (State.PAUSING, EventKind.QUIT): "_quit",
    (State.FINISHED, EventKind.RESTART): "_restart",
    (State.FINISHED, EventKind.QUIT): "_quit",
}


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the engine for rendering."""

    state: State
    elapsed: float
    time_ratio: float
    time_label: str
    progress_ratio: float
    accuracy_ratio: float
    wpm: int
    current_prompt: str
    typed: str
    marks: Tuple[bool, ...]
    overflow: int
    prompts_done: int
    prompts_total: int
    remaining_prompts: Tuple[str, ...]
    correct: int
    fault: int
    backspace_uses: int
    settings: Settings


@dataclass(frozen=True)
class SessionSummary:
    """What gets saved once a session is finished."""

    date: str
    duration: float
    content: Dict[str, Any]
    settings: Dict[str, Any]
    counters: Dict[str, int]
    wpm: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SessionEngine:
    """State machine driving one typing practice session.

    The engine starts in ``WAITING``; the first typing key starts the
    stopwatch and moves it to ``RUNNING``. From there it can be paused
    (``PAUSING``, resumed by typing), stopped (``FINISHED``), restarted
    (back to ``WAITING``) or quit (``QUITTING``, terminal). Which event does
    what in which state is decided by ``_TRANSITIONS`` alone.

    Time-based transitions are not pushed: the host loop has to call
    ``check_timer()`` regularly (once per frame is plenty).

    ``on_finish`` receives the session summary after every transition into
    ``FINISHED``. An ``OSError`` from it is logged; the engine state has
    already been committed by then and stays as it is.
    """

    def __init__(
        self,
        prompts: Sequence[str],
        settings: Optional[Settings] = None,
        *,
        source: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        now: Callable[[], datetime] = datetime.now,
        on_finish: Optional[Callable[[SessionSummary], None]] = None,
    ) -> None:
        self.settings = settings or Settings()
        self._sequencer = PromptSequencer(prompts, self.settings.prompt_mode, rng=rng)
        self._stopwatch = Stopwatch(self.settings.time_limit, clock=clock)
        self._comparator = TypingComparator(self._sequencer.current())
        self._source = dict(source or {})
        self._now = now
        self._on_finish = on_finish
        self._started_at = now()
        self._prompt_faults_start = 0
        self._state = State.WAITING

    @classmethod
    def from_content(cls, content: Content, settings: Optional[Settings] = None, **kwargs: Any) -> "SessionEngine":
        return cls(content.prompts, settings, source=content.describe(), **kwargs)

    # -- read access -------------------------------------------------------

    @property
    def state(self) -> State:
        return self._state

    @property
    def counters(self) -> Counters:
        return self._comparator.counters

    @property
    def stopwatch(self) -> Stopwatch:
        return self._stopwatch

    def should_quit(self) -> bool:
        return self._state is State.QUITTING

    def accuracy_ratio(self) -> float:
        return self._comparator.accuracy_ratio()

    def wpm(self) -> int:
        """Words per minute over the running time.

        Backspace uses are subtracted from the correct characters so typing
        and deleting the same letters cannot inflate the score. This also
        lowers the score of careful self-correction, which is accepted.
        """
        letters = max(0, self.counters.correct - self.counters.backspace)
        words = letters / CHARS_PER_WORD
        minutes = self._stopwatch.elapsed() / 60.0
        if minutes <= 0:
            return 0
        return int(math.floor(words / minutes + 0.5))

    def snapshot(self) -> SessionSnapshot:
        counters = self.counters
        return SessionSnapshot(
            state=self._state,
            elapsed=self._stopwatch.elapsed(),
            time_ratio=self._stopwatch.ratio(),
            time_label=self._stopwatch.label(),
            progress_ratio=self._sequencer.progress_ratio(),
            accuracy_ratio=self.accuracy_ratio(),
            wpm=self.wpm(),
            current_prompt=self._comparator.target,
            typed=self._comparator.typed,
            marks=tuple(self._comparator.marks()),
            overflow=self._comparator.overflow(),
            prompts_done=self._sequencer.consumed,
            prompts_total=self._sequencer.total,
            remaining_prompts=tuple(self._sequencer.remaining()),
            correct=counters.correct,
            fault=counters.fault,
            backspace_uses=counters.backspace,
            settings=self.settings,
        )

    def summary(self) -> SessionSummary:
        counters = self.counters
        return SessionSummary(
            date=self._started_at.isoformat(timespec="seconds"),
            duration=round(self._stopwatch.elapsed(), 3),
            content=dict(self._source, random=self._sequencer.mode is PromptMode.RANDOM),
            settings=self.settings.to_dict(),
            counters={
                "correct": counters.correct,
                "fault": counters.fault,
                "backspace": counters.backspace,
            },
            wpm=self.wpm(),
        )

    # -- input -------------------------------------------------------------

    def update(self, event: InputEvent) -> None:
        """Apply one input event according to the transition table."""
        handler = _TRANSITIONS.get((self._state, event.kind))
        if handler is None:
            return
        getattr(self, handler)(event)
        if event.kind in TYPING_KINDS and self._state is State.RUNNING:
            self._check_auto_advance()
            self._check_mistakes()

    def check_timer(self) -> None:
        """Finish the session if the time or the mistake budget ran out."""
        if self._state is not State.RUNNING:
            return
        if self._stopwatch.expired():
            logger.debug("Time limit reached")
            self._stop()
        else:
            self._check_mistakes()

    # -- transitions -------------------------------------------------------

    def _set_state(self, state: State) -> None:
        if state is not self._state:
            logger.debug("State %s -> %s", self._state.value, state.value)
        self._state = state

    def _begin(self, event: InputEvent) -> None:
        self._stopwatch.start()
        self._set_state(State.RUNNING)
        getattr(self, _TRANSITIONS[(State.RUNNING, event.kind)])(event)

    def _type_char(self, event: InputEvent) -> None:
        self._comparator.submit_char(event.char)

    def _backspace(self, event: InputEvent) -> None:
        if self.settings.backspace_enabled:
            self._comparator.remove_last()

    def _press_enter(self, event: Optional[InputEvent] = None) -> None:
        if self.settings.require_full_correctness and not self._comparator.is_correct():
            return
        self._finish_prompt()

    def _pause(self, event: Optional[InputEvent] = None) -> None:
        self._stopwatch.stop()
        self._set_state(State.PAUSING)

    def _stop(self, event: Optional[InputEvent] = None) -> None:
        self._stopwatch.stop()
        self._set_state(State.FINISHED)
        self._save()

    def _restart(self, event: Optional[InputEvent] = None) -> None:
        self._stopwatch.reset()
        self._sequencer.reset()
        self._comparator = TypingComparator(self._sequencer.current())
        self._prompt_faults_start = 0
        self._started_at = self._now()
        self._set_state(State.WAITING)

    def _quit(self, event: Optional[InputEvent] = None) -> None:
        self._stopwatch.stop()
        self._set_state(State.QUITTING)

    # -- helpers -----------------------------------------------------------

    def _finish_prompt(self) -> None:
        target = self._comparator.target
        self._comparator.finish()
        mistaken = self.counters.fault > self._prompt_faults_start
        if self.settings.repeat_on_mistake and mistaken:
            next_prompt: Optional[str] = target
        else:
            next_prompt = self._sequencer.advance()
        if next_prompt is None:
            self._stop()
            return
        self._comparator.reset(next_prompt)
        self._prompt_faults_start = self.counters.fault

    def _check_auto_advance(self) -> None:
        if not self.settings.auto_advance or not self._comparator.is_complete():
            return
        self._press_enter()

    def _check_mistakes(self) -> None:
        threshold = self.settings.mistake_terminate_threshold
        if self._state is State.RUNNING and threshold is not None and self.counters.fault >= threshold:
            logger.debug("Mistake limit of %d reached", threshold)
            self._stop()

    def _save(self) -> None:
        if self._on_finish is None:
            return
        try:
            self._on_finish(self.summary())
        except OSError as e:
            logger.warning("Could not save session results: %s", e)
