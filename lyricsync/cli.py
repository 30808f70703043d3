from __future__ import annotations

import json
from pathlib import Path

import typer

from lyricsync.app import follow as follow_loop
from lyricsync.config import load_config, save_config_credential
from lyricsync.errors import MalformedLyricsError, ResolutionError
from lyricsync.logging_setup import setup_logging
from lyricsync.lyrics.parse import parse_lyrics_with_stats
from lyricsync.sources.pipeline import ResolutionPipeline


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _fmt_ms(t_ms: int) -> str:
    m, s = divmod(t_ms // 1000, 60)
    return f"{m:02d}:{s:02d}.{(t_ms % 1000) // 10:02d}"


def _require_credential(sp_dc: str) -> None:
    if not sp_dc:
        typer.echo("Error: no sp_dc credential; run `lyricsync login` or set LYRICSYNC_SP_DC", err=True)
        raise typer.Exit(code=2)


@app.command()
def resolve(
    title: str = typer.Argument(..., help="Track title"),
    artist: str = typer.Argument(..., help="Track artist"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Resolve a song into time-coded lyrics and print them."""
    setup_logging(debug)
    cfg = load_config()
    _require_credential(cfg.sp_dc)

    try:
        song = ResolutionPipeline.from_config(cfg).resolve(title, artist)
    except ResolutionError as e:
        typer.echo(f"No lyrics found ({e.stage.value}): {e.cause}", err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "title": song.title,
                    "artist": song.artist,
                    "album": song.album,
                    "lines": [
                        {"start_time_ms": ln.start_time_ms, "words": ln.words}
                        for ln in song.lyrics_lines
                    ],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    typer.echo(song.display)
    if song.album:
        typer.echo(f"Album: {song.album}")
    for ln in song.lyrics_lines:
        typer.echo(f"[{_fmt_ms(ln.start_time_ms)}] {ln.words}")


@app.command()
def follow(
    title: str = typer.Argument(..., help="Track title"),
    artist: str = typer.Argument(..., help="Track artist"),
    offset: float = typer.Option(0.0, "--offset", help="Seconds into the track when the match was made"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    tick: float | None = typer.Option(None, "--tick", help="Sync tick period in seconds"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
    context_lines: int | None = typer.Option(None, "--context", help="Lines kept above the current line"),
):
    """
    Follow lyrics line by line, as if the song had just been recognized.
    """
    cfg = load_config()
    if tick is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "tick_interval_s": tick})
    if context_lines is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "context_lines": context_lines})
    if no_alt_screen:
        cfg = cfg.__class__(**{**cfg.__dict__, "use_alt_screen": False})

    setup_logging(debug)
    _require_credential(cfg.sp_dc)
    raise typer.Exit(code=follow_loop(cfg, title=title, artist=artist, offset_s=offset))


@app.command()
def parse(lyrics_path: Path):
    """Parse a saved color-lyrics JSON document and print stats."""
    try:
        doc = json.loads(lyrics_path.read_text(encoding="utf-8"))
        lines, stats = parse_lyrics_with_stats(doc)
    except (ValueError, MalformedLyricsError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"lines_kept={stats.lines_kept}")
    typer.echo(f"lines_dropped={stats.lines_dropped}")
    typer.echo(f"sync_type={stats.sync_type or '-'}")
    typer.echo(f"provider={stats.provider or '-'}")
    if lines:
        typer.echo(f"first_line_ms={lines[0].start_time_ms}")
        typer.echo(f"last_line_ms={lines[-1].start_time_ms}")


@app.command()
def login(sp_dc: str = typer.Argument(..., help="Value of the sp_dc cookie from open.spotify.com")):
    """Store the sp_dc session credential in the config file."""
    if not sp_dc.strip():
        raise typer.BadParameter("sp_dc must not be empty")
    path = save_config_credential(sp_dc)
    typer.echo(f"Credential saved: {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
