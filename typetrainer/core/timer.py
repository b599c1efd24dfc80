from __future__ import annotations

import time
from typing import Callable, Optional


class Stopwatch:
    """Accumulates running time across any number of start/stop cycles.

    Time only counts while the stopwatch is running, so pausing a session is
    just ``stop()`` followed later by ``start()``. An optional limit (in
    seconds) turns the stopwatch into a countdown that ``expired()`` reports
    on; nothing fires on its own, the host loop has to poll.

    ``clock`` must return monotonic seconds. Tests pass a fake clock so
    elapsed time can be advanced without sleeping.
    """

    def __init__(
        self,
        limit: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = limit
        self._clock = clock
        self._accumulated = 0.0
        self._running_since: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._running_since is not None

    def start(self) -> None:
        """Begin an interval. Starting a running stopwatch does nothing."""
        if self._running_since is None:
            self._running_since = self._clock()

    def stop(self) -> None:
        """Fold the active interval into the accumulated time."""
        if self._running_since is not None:
            self._accumulated += max(0.0, self._clock() - self._running_since)
            self._running_since = None

    def reset(self) -> None:
        """Zero the accumulated time and drop any active interval."""
        self._accumulated = 0.0
        self._running_since = None

    def elapsed(self) -> float:
        """Seconds counted so far, including the active interval."""
        if self._running_since is None:
            return self._accumulated
        return self._accumulated + max(0.0, self._clock() - self._running_since)

    def expired(self) -> bool:
        if self._limit is None:
            return False
        return self.elapsed() >= self._limit

    def ratio(self) -> float:
        """Fill level for a timer gauge.

        With a limit this is the used share of it; without one the gauge
        sweeps once per minute.
        """
        elapsed = self.elapsed()
        if self._limit:
            return max(0.0, min(1.0, elapsed / self._limit))
        return (elapsed % 60.0) / 60.0

    def label(self) -> str:
        """Elapsed time as ``MM:SS``."""
        minutes, seconds = divmod(int(self.elapsed()), 60)
        return f"{minutes:02d}:{seconds:02d}"
