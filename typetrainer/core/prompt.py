from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass
class Counters:
    """Session-wide keystroke tallies. They only ever grow."""

    correct: int = 0
    fault: int = 0
    backspace: int = 0

    @property
    def judged(self) -> int:
        return self.correct + self.fault


class TypingComparator:
    """Compares typed characters against the current target, one at a time.

    Each character is judged once, when it is typed, by comparing it with the
    target character at the same position. Deleting it later does not undo
    that judgement; it only counts as a backspace use. The counters span the
    whole session while the target and typed buffers belong to one prompt.
    """

    def __init__(self, target: str = "") -> None:
        self.counters = Counters()
        self._target: List[str] = list(target)
        self._typed: List[str] = []

    @property
    def target(self) -> str:
        return "".join(self._target)

    @property
    def typed(self) -> str:
        return "".join(self._typed)

    def reset(self, target: str) -> None:
        """Bind to a new target with an empty typed buffer. Counters are kept."""
        self._target = list(target)
        self._typed = []

    def submit_char(self, char: str) -> bool:
        """Append one character and return whether it matched the target."""
        position = len(self._typed)
        self._typed.append(char)
        correct = position < len(self._target) and char == self._target[position]
        if correct:
            self.counters.correct += 1
        else:
            self.counters.fault += 1
        return correct

    def remove_last(self) -> None:
        if self._typed:
            self._typed.pop()
            self.counters.backspace += 1

    def missing_count(self) -> int:
        """Target characters not typed yet."""
        return max(0, len(self._target) - len(self._typed))

    def overflow(self) -> int:
        """Typed characters beyond the end of the target."""
        return max(0, len(self._typed) - len(self._target))

    def is_complete(self) -> bool:
        return len(self._typed) == len(self._target)

    def is_correct(self) -> bool:
        return self._typed == self._target

    def marks(self) -> List[bool]:
        """Match flag for each typed position that lies inside the target."""
        return [t == p for t, p in zip(self._typed, self._target)]

    def finish(self) -> None:
        """Charge untyped characters as faults and go inert until reset()."""
        self.counters.fault += self.missing_count()
        self._target = []
        self._typed = []

    def accuracy_ratio(self) -> float:
        judged = self.counters.judged
        if judged == 0:
            return 1.0
        return self.counters.correct / judged
