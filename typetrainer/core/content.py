from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import yaml

logger = logging.getLogger(__name__)

# Progress shown for random mode, which has no notion of "how far along".
INDETERMINATE_PROGRESS = 1.0


class EmptyPromptsError(ValueError):
    """Raised when there is nothing to type."""


class PromptMode(str, enum.Enum):
    SEQUENTIAL = "sequential"
    RANDOM = "random"


class Split(str, enum.Enum):
    """How a source text is cut into prompts."""

    LINES = "lines"
    WORDS = "words"
    TEXT = "text"


def split_text(text: str, split: Split) -> List[str]:
    """Cut ``text`` into non-empty prompts."""
    if split is Split.WORDS:
        return text.split()
    if split is Split.LINES:
        return [line.rstrip() for line in text.splitlines() if line.strip()]
    # Enter finishes a prompt, so a single block cannot contain line breaks.
    block = " ".join(line.strip() for line in text.splitlines() if line.strip())
    return [block] if block else []


@dataclass(frozen=True)
class Content:
    path: Path
    split: Split
    title: str
    prompts: Tuple[str, ...]

    def describe(self) -> dict:
        """The part of the content worth keeping in a results file."""
        return {"file": self.path.name, "title": self.title, "split": self.split.value}


def _read_source(path: Path) -> Tuple[str, str]:
    """Return ``(title, text)`` for a plain text or YAML prompt file."""
    raw_text = path.read_text(encoding="utf-8")
    if path.suffix.lower() not in (".yaml", ".yml"):
        return path.stem, raw_text

    try:
        raw = yaml.safe_load(raw_text)
    except yaml.YAMLError as e:
        raise ValueError(f"{path.name}: {e}") from e
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected YAML with 'title' and 'content'")
    title = raw.get("title") or path.stem
    if not isinstance(title, str):
        raise ValueError(f"{path.name}: invalid 'title'")
    content = raw.get("content")
    if content is None:
        raise ValueError(f"{path.name}: missing 'content'")
    if isinstance(content, list):
        text = "\n".join(str(item) for item in content)
    else:
        text = str(content)
    return title.strip(), text


def load_prompts(
    path: Path,
    split: Split = Split.LINES,
    start: int = 0,
    limit: Optional[int] = None,
) -> Content:
    """Load a prompt file and cut it into prompts.

    ``start`` skips that many prompts from the beginning, ``limit`` keeps at
    most that many of the rest.
    """
    title, text = _read_source(path)
    prompts = split_text(text, split)
    if not prompts:
        raise EmptyPromptsError(f"Couldn't create any prompts from the file at {path}")

    if start:
        if start >= len(prompts):
            raise EmptyPromptsError(f"Starting value {start} results in 0 prompts")
        prompts = prompts[start:]
    if limit is not None and limit < len(prompts):
        prompts = prompts[:limit]

    logger.info("Loaded %d prompts from %s (split=%s)", len(prompts), path, split.value)
    return Content(path=path, split=split, title=title, prompts=tuple(prompts))


class PromptSequencer:
    """Hands out prompts one at a time, in file order or at random.

    Sequential mode walks the list once and then reports exhaustion. Random
    mode draws uniformly from the whole list on every advance, so a prompt
    can come up twice in a row; the session then only ends on a time limit,
    a mistake limit or a manual stop.
    """

    def __init__(
        self,
        prompts: Sequence[str],
        mode: PromptMode = PromptMode.SEQUENTIAL,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not prompts:
            raise EmptyPromptsError("cannot start: no prompts available")
        if any(not p for p in prompts):
            raise ValueError("prompts must not be empty strings")
        self._prompts: Tuple[str, ...] = tuple(prompts)
        self._mode = PromptMode(mode)
        self._rng = rng or random.Random()
        self._index = 0
        self._consumed = 0
        self.reset()

    @property
    def mode(self) -> PromptMode:
        return self._mode

    @property
    def total(self) -> int:
        return len(self._prompts)

    @property
    def consumed(self) -> int:
        """Number of prompts advanced past since the last reset."""
        return self._consumed

    def reset(self) -> None:
        """Back to the first prompt; random mode draws a fresh one."""
        self._consumed = 0
        self._index = self._draw() if self._mode is PromptMode.RANDOM else 0

    def is_exhausted(self) -> bool:
        return self._index >= len(self._prompts)

    def current(self) -> str:
        """The active prompt. Raises IndexError once sequential mode ran out."""
        return self._prompts[self._index]

    def advance(self) -> Optional[str]:
        """Move on and return the new prompt, or None when the list is used up."""
        self._consumed += 1
        if self._mode is PromptMode.RANDOM:
            self._index = self._draw()
            return self._prompts[self._index]
        self._index = min(self._index + 1, len(self._prompts))
        if self.is_exhausted():
            return None
        return self._prompts[self._index]

    def remaining(self) -> List[str]:
        """Prompts still to come after the current one."""
        if self._mode is PromptMode.RANDOM:
            return []
        return list(self._prompts[self._index + 1:])

    def progress_ratio(self) -> float:
        if self._mode is PromptMode.RANDOM:
            return INDETERMINATE_PROGRESS
        return self._index / len(self._prompts)

    def _draw(self) -> int:
        return self._rng.randrange(len(self._prompts))
