from __future__ import annotations

import shutil
import signal
import sys
import threading
from dataclasses import dataclass
from typing import Callable, TextIO


CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = _sgr(36, 1)  # cyan bold
    current: str = _sgr(33, 1)  # yellow bold
    sung: str = _sgr(37)  # white
    upcoming: str = _sgr(90)  # bright black
    warning: str = _sgr(31, 1)  # red bold
    reset: str = _sgr(0)


def visible_window(total: int, current_idx: int, context_lines: int, body_rows: int) -> tuple[int, int]:
    """[start, end) slice of lines to draw with `context_lines` kept above the current one."""
    if current_idx < 0:
        start = 0
    else:
        start = max(current_idx - context_lines, 0)
    end = min(start + body_rows, total)
    start = max(end - body_rows, 0)
    return start, end


class AnsiRenderer:
    def __init__(self, use_alt_screen: bool = True, theme: Theme | None = None, out: TextIO | None = None):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self.out = out or sys.stdout
        self._entered = False
        self._resize_handler: Callable[..., None] | None = None
        self._last_render_args: tuple[str, list[str], int, int] | None = None
        # tick thread and SIGWINCH handler both draw; RLock so a handler that
        # interrupts a draw on the same thread does not deadlock
        self._draw_lock = threading.RLock()

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        if self.use_alt_screen:
            self.out.write(CSI + "?1049h")  # alt screen
        self.out.write(CSI + "?25l")  # hide cursor
        self.out.write(CSI + "H" + CSI + "2J")  # home + clear
        self.out.flush()
        self._entered = True

        def _on_resize(signum=None, frame=None):
            if self._last_render_args:
                self.render(*self._last_render_args)

        self._resize_handler = _on_resize
        if hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, _on_resize)

    def exit(self) -> None:
        if not self._entered:
            return
        if self._resize_handler and hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        self._resize_handler = None
        self.out.write(self.theme.reset)
        self.out.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            self.out.write(CSI + "?1049l")  # normal screen
        self.out.flush()
        self._entered = False
        self._last_render_args = None

    def message(self, title: str, text: str) -> None:
        self.render(title, [f"{self.theme.warning}{text}{self.theme.reset}"], current_idx=-1)

    def render(
        self,
        title: str,
        lines: list[str],
        current_idx: int,
        context_lines: int = 2,
    ) -> None:
        self._last_render_args = (title, lines, current_idx, context_lines)

        _cols, rows = shutil.get_terminal_size(fallback=(80, 24))
        # reserve 1 line for title
        body_rows = max(rows - 1, 1)
        start, end = visible_window(len(lines), current_idx, context_lines, body_rows)

        out: list[str] = [f"{self.theme.title}♫ {title} ♫{self.theme.reset}"]
        for i in range(start, end):
            if i == current_idx:
                style = self.theme.current
            elif i < current_idx:
                style = self.theme.sung
            else:
                style = self.theme.upcoming
            out.append(f"{style}{lines[i]}{self.theme.reset}")

        # move home + clear, then print full frame in one write
        frame = CSI + "H" + CSI + "2J" + "\n".join(out) + self.theme.reset
        with self._draw_lock:
            self.out.write(frame)
            self.out.flush()
