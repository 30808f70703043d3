from __future__ import annotations

import pytest

from lyricsync.errors import MalformedLyricsError
from lyricsync.lyrics.model import LyricLine
from lyricsync.lyrics.parse import parse_lyrics_document, parse_lyrics_with_stats


def _doc(lines, **extra):
    return {"lyrics": {"lines": lines, **extra}, "colors": {}}


def test_parse_keeps_order_and_drops_incomplete():
    doc = _doc(
        [
            {"startTimeMs": "0", "words": "first"},
            {"startTimeMs": "900"},
            {"words": "no time"},
            {"startTimeMs": "1800", "words": "second", "syllables": []},
            {"startTimeMs": 2500, "words": "numeric time is not a string"},
            {"startTimeMs": "2600", "words": None},
            {"startTimeMs": "oops", "words": "third"},
        ]
    )
    lines = parse_lyrics_document(doc)
    assert lines == (
        LyricLine(0, "first"),
        LyricLine(1800, "second"),
        LyricLine(0, "third"),
    )


def test_parse_does_not_resort():
    doc = _doc([{"startTimeMs": "5000", "words": "b"}, {"startTimeMs": "1000", "words": "a"}])
    assert [ln.words for ln in parse_lyrics_document(doc)] == ["b", "a"]


def test_parse_empty_lines_is_empty_result():
    assert parse_lyrics_document(_doc([])) == ()


@pytest.mark.parametrize(
    "doc",
    [
        [],
        "text",
        {},
        {"lyrics": None},
        {"lyrics": {"syncType": "LINE_SYNCED"}},
        {"lyrics": {"lines": {"startTimeMs": "0", "words": "x"}}},
        {"lyrics": {"lines": [{"startTimeMs": "0", "words": "a"}, "not an object"]}},
        {"lyrics": {"lines": [{"startTimeMs": "0", "words": "a"}, "oops", 7]}},
        {"lyrics": {"lines": [None]}},
        {"lyrics": {"lines": [["0", "a"]]}},
    ],
)
def test_parse_malformed_document(doc):
    with pytest.raises(MalformedLyricsError):
        parse_lyrics_document(doc)


def test_parse_with_stats():
    doc = _doc(
        [{"startTimeMs": "0", "words": "a"}, {"words": "b"}],
        syncType="LINE_SYNCED",
        provider="MusixMatch",
    )
    lines, stats = parse_lyrics_with_stats(doc)
    assert len(lines) == 1
    assert stats.lines_total == 2
    assert stats.lines_kept == 1
    assert stats.lines_dropped == 1
    assert stats.sync_type == "LINE_SYNCED"
    assert stats.provider == "MusixMatch"
