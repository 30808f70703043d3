from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from lyricsync.lyrics.model import LyricLine

from .ticker import IntervalTicker, Ticker

logger = logging.getLogger(__name__)

IndexObserver = Callable[[int], None]


@dataclass(frozen=True, slots=True)
class SyncState:
    lines: tuple[LyricLine, ...]
    origin: float
    offset_s: float
    current_index: int = 0


def active_index(lines: Sequence[LyricLine], elapsed_s: float) -> int:
    """
    Index of the last line already started at `elapsed_s`, 0 if none has.

    Lines are trusted to be in ascending start order; the forward scan stops at
    the first line still in the future.
    """
    idx = 0
    for i, line in enumerate(lines):
        if line.start_time_ms / 1000 <= elapsed_s:
            idx = i
        else:
            break
    return idx


class SyncEngine:
    """
    Maps elapsed playback time onto the active lyric line.

    `arm` anchors the time origin and starts the ticker, every tick recomputes
    the index and reports it to observers, `disarm` stops and forgets it all.
    The clock is injectable and `tick(now)` can be driven by hand.
    """

    def __init__(
        self,
        *,
        ticker: Ticker | None = None,
        clock: Callable[[], float] = time.monotonic,
        interval_s: float = 0.5,
    ):
        self.ticker = ticker if ticker is not None else IntervalTicker(interval_s)
        self.clock = clock
        self._lock = threading.RLock()
        self._state: SyncState | None = None
        self._observers: list[IndexObserver] = []

    @property
    def state(self) -> SyncState | None:
        return self._state

    @property
    def is_armed(self) -> bool:
        return self._state is not None

    def add_observer(self, observer: IndexObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def remove_observer(self, observer: IndexObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def arm(self, lines: Sequence[LyricLine], offset_s: float, now: float | None = None) -> None:
        origin = self.clock() if now is None else now
        with self._lock:
            self._state = SyncState(lines=tuple(lines), origin=origin, offset_s=float(offset_s))
            logger.debug("Armed with %s lines, offset %.3fs", len(lines), offset_s)
            if not self.ticker.running:
                self.ticker.start(self.tick)

    def tick(self, now: float | None = None) -> int | None:
        with self._lock:
            st = self._state
            if st is None:
                return None
            t = self.clock() if now is None else now
            elapsed = (t - st.origin) + st.offset_s
            idx = active_index(st.lines, elapsed)
            if idx != st.current_index:
                self._state = SyncState(st.lines, st.origin, st.offset_s, idx)
            observers = list(self._observers)

        for observer in observers:
            observer(idx)
        return idx

    def disarm(self) -> None:
        self.ticker.stop()
        with self._lock:
            if self._state is not None:
                logger.debug("Disarmed")
            self._state = None
