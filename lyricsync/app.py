from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

from lyricsync.config import AppConfig
from lyricsync.errors import ResolutionError
from lyricsync.lyrics.model import Song
from lyricsync.render.ansi import AnsiRenderer
from lyricsync.sources.pipeline import ResolutionPipeline
from lyricsync.sync.engine import SyncEngine

logger = logging.getLogger(__name__)

SongListener = Callable[[Song], None]
FailureListener = Callable[[ResolutionError], None]


class RecognitionSession:
    """
    Receives recognition events and drives pipeline -> engine.

    Resolution runs on a background executor. Only the most recent match is
    applied: a result that arrives after a newer match or a rescan is dropped.
    """

    def __init__(
        self,
        pipeline: ResolutionPipeline,
        engine: SyncEngine,
        *,
        executor: ThreadPoolExecutor | None = None,
    ):
        self.pipeline = pipeline
        self.engine = engine
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="lyricsync-resolve")
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._generation = 0
        self._song: Song | None = None
        self._song_listeners: list[SongListener] = []
        self._failure_listeners: list[FailureListener] = []

    @property
    def song(self) -> Song | None:
        return self._song

    def add_song_listener(self, listener: SongListener) -> None:
        self._song_listeners.append(listener)

    def add_failure_listener(self, listener: FailureListener) -> None:
        self._failure_listeners.append(listener)

    def on_match(self, title: str, artist: str, offset_s: float) -> Future:
        generation = self._reset()
        logger.info("Match: %s - %s (offset %.2fs)", artist, title, offset_s)
        future = self._executor.submit(self.pipeline.resolve, title, artist)
        future.add_done_callback(lambda f: self._on_resolved(f, generation, offset_s))
        return future

    def on_no_match(self, reason: str | None = None) -> None:
        logger.info("No match found: %s", reason or "Unknown error")

    def rescan(self) -> None:
        self._reset()

    def close(self) -> None:
        self._reset()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _reset(self) -> int:
        with self._lock:
            self._generation += 1
            self._song = None
            generation = self._generation
        self.engine.disarm()
        return generation

    def _on_resolved(self, future: Future, generation: int, offset_s: float) -> None:
        exc = future.exception()
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale resolution (generation %s)", generation)
                return
            if exc is None:
                self._song = future.result()

        if exc is not None:
            if not isinstance(exc, ResolutionError):
                logger.error("Resolution crashed", exc_info=exc)
                return
            logger.warning("No lyrics: %s", exc)
            for fl in self._failure_listeners:
                fl(exc)
            return

        song = future.result()
        for sl in self._song_listeners:
            sl(song)
        with self._lock:
            # a rescan may have slipped in while listeners ran
            if generation == self._generation:
                self.engine.arm(song.lyrics_lines, offset_s)


def follow(cfg: AppConfig, *, title: str, artist: str, offset_s: float) -> int:
    """
    Terminal loop for one simulated match:
    match -> resolve -> arm -> redraw whenever the active line changes.
    """
    pipeline = ResolutionPipeline.from_config(cfg)
    engine = SyncEngine(interval_s=cfg.tick_interval_s)
    session = RecognitionSession(pipeline, engine)
    renderer = AnsiRenderer(use_alt_screen=cfg.use_alt_screen)

    heading = f"{artist} - {title}"
    last_idx: int | None = None
    failed = threading.Event()

    def _on_song(song: Song) -> None:
        lines = [ln.words for ln in song.lyrics_lines]
        if not lines:
            renderer.message(song.display, "No lyrics lines for this track")
            return
        renderer.render(song.display, lines, current_idx=-1, context_lines=cfg.context_lines)

    def _on_index(idx: int) -> None:
        nonlocal last_idx
        song = session.song
        if song is None or not song.lyrics_lines or idx == last_idx:
            return
        last_idx = idx
        lines = [ln.words for ln in song.lyrics_lines]
        renderer.render(song.display, lines, current_idx=idx, context_lines=cfg.context_lines)

    def _on_failure(err: ResolutionError) -> None:
        renderer.message(heading, f"No lyrics found: {err}")
        failed.set()

    session.add_song_listener(_on_song)
    session.add_failure_listener(_on_failure)
    engine.add_observer(_on_index)

    renderer.enter()
    try:
        renderer.message(heading, "Resolving lyrics…")
        future = session.on_match(title, artist, offset_s)
        while not failed.is_set():
            if future.done() and future.exception() is not None:
                break
            time.sleep(0.2)
        # keep the failure on screen for a moment
        time.sleep(2.0)
        return 1
    except KeyboardInterrupt:
        return 0
    finally:
        session.close()
        renderer.exit()
