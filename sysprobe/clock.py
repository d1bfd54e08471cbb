"""Clock readings in nanoseconds and a simple interval timer."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

__all__ = ["system_time", "relative_time", "Timer"]


def system_time() -> int:
    """Wall-clock time in nanoseconds since the epoch."""
    return time.time_ns()


def relative_time() -> int:
    """Monotonic time in nanoseconds since an unspecified starting point."""
    return time.monotonic_ns()


class Timer:
    """Call a function after an interval, once or repeatedly until stopped.

    Each round sleeps the full interval and then calls the callback, so a
    repeating timer that is stopped still completes its current round.
    """

    def __init__(
        self,
        interval: float | timedelta,
        callback: Callable[[], Any],
        single: bool = False,
    ) -> None:
        seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
        if seconds < 0:
            raise ValueError("interval must not be negative")
        self._running = not single
        self._thread = threading.Thread(
            target=self._run, args=(seconds, callback), name="timer", daemon=True
        )
        self._thread.start()

    def _run(self, seconds: float, callback: Callable[[], Any]) -> None:
        while True:
            time.sleep(seconds)
            callback()
            if not self._running:
                break

    def stop(self) -> None:
        """Stop repeating and wait for the current round to finish."""
        self._running = False
        if self._thread is not threading.current_thread():
            self._thread.join()

    def __enter__(self) -> Timer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()