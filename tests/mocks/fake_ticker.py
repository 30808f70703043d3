from __future__ import annotations

from typing import Callable


class ManualTicker:
    """Ticker with no thread: tests call `fire()` or the engine's `tick(now)` themselves."""

    def __init__(self) -> None:
        self._callback: Callable[[], None] | None = None
        self.starts = 0
        self.stops = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        if self._callback is None:
            self.starts += 1
            self._callback = callback

    def stop(self) -> None:
        self.stops += 1
        self._callback = None

    def fire(self) -> None:
        if self._callback is not None:
            self._callback()
