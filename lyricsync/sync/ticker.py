from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    @property
    def running(self) -> bool: ...

    def start(self, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class IntervalTicker:
    """
    Calls `callback` every `interval_s` seconds from one background thread.

    The next wait starts only after the callback returns, so ticks never overlap.
    """

    def __init__(self, interval_s: float = 0.5, *, name: str = "lyricsync-tick"):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.interval_s = interval_s
        self.name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        t = self._thread
        return t is not None and t.is_alive() and not self._stop.is_set()

    def start(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self.running:
                return
            stop = threading.Event()
            self._stop = stop
            self._thread = threading.Thread(
                target=self._run, args=(callback, stop), name=self.name, daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        with self._lock:
            self._stop.set()
            t = self._thread
            self._thread = None
        # stop() may come from the callback itself
        if t is not None and t is not threading.current_thread():
            t.join(timeout=max(self.interval_s * 4, 1.0))

    def _run(self, callback: Callable[[], None], stop: threading.Event) -> None:
        while not stop.wait(self.interval_s):
            try:
                callback()
            except Exception:
                logger.exception("Tick callback failed")
