from __future__ import annotations

import json

from typer.testing import CliRunner

import lyricsync.cli as cli
from lyricsync.errors import LyricsHttpStatusError, ResolutionError
from lyricsync.lyrics.model import LyricLine, Song
from lyricsync.sources.types import Stage

runner = CliRunner()


class _FakePipeline:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def resolve(self, song, artist):
        self.calls.append((song, artist))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _use_pipeline(monkeypatch, result):
    fake = _FakePipeline(result)
    monkeypatch.setattr(cli.ResolutionPipeline, "from_config", classmethod(lambda cls, cfg, http=None: fake))
    return fake


def test_resolve_prints_timed_lines(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("LYRICSYNC_SP_DC", "cookie")
    song = Song("Song", "Artist", "LP", (LyricLine(0, "a"), LyricLine(61250, "b")))
    fake = _use_pipeline(monkeypatch, song)

    result = runner.invoke(cli.app, ["resolve", "Song", "Artist"])

    assert result.exit_code == 0, result.output
    assert fake.calls == [("Song", "Artist")]
    assert "Artist - Song" in result.output
    assert "Album: LP" in result.output
    assert "[00:00.00] a" in result.output
    assert "[01:01.25] b" in result.output


def test_resolve_json(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("LYRICSYNC_SP_DC", "cookie")
    _use_pipeline(monkeypatch, Song("S", "A", None, (LyricLine(5, "x"),)))

    result = runner.invoke(cli.app, ["resolve", "S", "A", "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["album"] is None
    assert data["lines"] == [{"start_time_ms": 5, "words": "x"}]


def test_resolve_failure_exits_1(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("LYRICSYNC_SP_DC", "cookie")
    err = LyricsHttpStatusError(404)
    _use_pipeline(monkeypatch, ResolutionError(Stage.LYRICS, err))

    result = runner.invoke(cli.app, ["resolve", "S", "A"])
    assert result.exit_code == 1


def test_resolve_without_credential(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("LYRICSYNC_SP_DC", raising=False)
    fake = _use_pipeline(monkeypatch, Song("S", "A"))

    result = runner.invoke(cli.app, ["resolve", "S", "A"])
    assert result.exit_code == 2
    assert fake.calls == []


def test_login_then_parse(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    result = runner.invoke(cli.app, ["login", "AQBcookie"])
    assert result.exit_code == 0, result.output
    saved = json.loads((tmp_path / "lyricsync" / "config.json").read_text(encoding="utf-8"))
    assert saved["sp_dc"] == "AQBcookie"

    doc = tmp_path / "lyrics.json"
    doc.write_text(
        json.dumps(
            {
                "lyrics": {
                    "syncType": "LINE_SYNCED",
                    "lines": [{"startTimeMs": "100", "words": "a"}, {"words": "b"}],
                }
            }
        ),
        encoding="utf-8",
    )
    result = runner.invoke(cli.app, ["parse", str(doc)])
    assert result.exit_code == 0, result.output
    assert "lines_total=2" in result.output
    assert "lines_dropped=1" in result.output
    assert "sync_type=LINE_SYNCED" in result.output
    assert "first_line_ms=100" in result.output


def test_parse_rejects_malformed(tmp_path):
    doc = tmp_path / "bad.json"
    doc.write_text('{"lyrics": {}}', encoding="utf-8")
    result = runner.invoke(cli.app, ["parse", str(doc)])
    assert result.exit_code == 1
