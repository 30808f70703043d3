from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from lyricsync.errors import MalformedLyricsError

from .model import LyricLine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LyricsParseStats:
    lines_total: int
    lines_kept: int
    lines_dropped: int
    sync_type: str | None = None
    provider: str | None = None


def _lines_of(doc: Any) -> list[Any]:
    if not isinstance(doc, Mapping):
        raise MalformedLyricsError("lyrics document is not a JSON object")
    lyrics = doc.get("lyrics")
    if not isinstance(lyrics, Mapping):
        raise MalformedLyricsError("lyrics document has no 'lyrics' object")
    lines = lyrics.get("lines")
    if not isinstance(lines, list):
        raise MalformedLyricsError("lyrics document has no 'lyrics.lines' list")
    if not all(isinstance(item, Mapping) for item in lines):
        raise MalformedLyricsError("'lyrics.lines' holds non-object elements")
    return lines


def parse_lyrics_with_stats(doc: Any) -> tuple[tuple[LyricLine, ...], LyricsParseStats]:
    """
    Map `lyrics.lines` of a color-lyrics document onto LyricLines.

    `lyrics.lines` must be a list of objects. Objects without a string
    `startTimeMs` and a string `words` are dropped; the kept ones stay in
    document order.
    """
    raw_lines = _lines_of(doc)
    out: list[LyricLine] = []
    for item in raw_lines:
        start = item.get("startTimeMs")
        words = item.get("words")
        if not isinstance(start, str) or not isinstance(words, str):
            continue
        out.append(LyricLine.from_raw(start, words))

    dropped = len(raw_lines) - len(out)
    if dropped:
        logger.debug("Dropped %s of %s lyric lines with missing fields", dropped, len(raw_lines))

    lyrics = doc["lyrics"]
    provider = lyrics.get("provider")
    sync_type = lyrics.get("syncType")
    stats = LyricsParseStats(
        lines_total=len(raw_lines),
        lines_kept=len(out),
        lines_dropped=dropped,
        sync_type=sync_type if isinstance(sync_type, str) else None,
        provider=provider if isinstance(provider, str) else None,
    )
    return tuple(out), stats


def parse_lyrics_document(doc: Any) -> tuple[LyricLine, ...]:
    lines, _stats = parse_lyrics_with_stats(doc)
    return lines
