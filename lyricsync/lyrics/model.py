from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, slots=True)
class LyricLine:
    start_time_ms: int
    words: str

    @classmethod
    def from_raw(cls, start_time_ms: Any, words: str) -> "LyricLine":
        # a bad timestamp pins the line to the start instead of losing it
        raw = start_time_ms if isinstance(start_time_ms, str) else str(start_time_ms)
        if raw.isascii() and _INT_RE.fullmatch(raw):
            t_ms = int(raw)
        else:
            t_ms = 0
        if t_ms < 0:
            t_ms = 0
        return cls(start_time_ms=t_ms, words=words)


@dataclass(frozen=True, slots=True)
class Song:
    title: str
    artist: str
    album: str | None = None
    lyrics_lines: tuple[LyricLine, ...] = ()

    @property
    def display(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.artist or "Unknown track"
