from __future__ import annotations

import logging
from typing import Any

from lyricsync.config import AppConfig
from lyricsync.errors import LyricsError, ResolutionError, TokenError, TrackError
from lyricsync.lyrics.model import Song

from .lyrics import LyricsFetcher
from .token import TokenProvider
from .track import TrackResolver
from .types import Stage

logger = logging.getLogger(__name__)


class ResolutionPipeline:
    """
    token -> track -> lyrics, one after another.

    The first failing stage ends the run with a ResolutionError naming it; no
    stage is retried and nothing is returned unless all three succeed. The
    pipeline keeps no per-run state, so runs may overlap freely.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        track_resolver: TrackResolver,
        lyrics_fetcher: LyricsFetcher,
    ):
        self.token_provider = token_provider
        self.track_resolver = track_resolver
        self.lyrics_fetcher = lyrics_fetcher

    @classmethod
    def from_config(cls, cfg: AppConfig, *, http: Any = None) -> "ResolutionPipeline":
        common = dict(
            http=http,
            user_agent=cfg.user_agent,
            app_platform=cfg.app_platform,
            timeout_s=cfg.http_timeout_s,
        )
        return cls(
            TokenProvider(cfg.sp_dc, token_url=cfg.token_url, **common),
            TrackResolver(search_url=cfg.search_url, **common),
            LyricsFetcher(lyrics_url=cfg.lyrics_url, **common),
        )

    def resolve(self, song: str, artist: str) -> Song:
        logger.info("Resolving lyrics for %s - %s", artist, song)

        try:
            token = self.token_provider.fetch_token()
        except TokenError as e:
            raise ResolutionError(Stage.TOKEN, e) from e

        try:
            track = self.track_resolver.resolve_track(song, artist, token)
        except TrackError as e:
            raise ResolutionError(Stage.TRACK, e) from e

        try:
            lines = self.lyrics_fetcher.fetch_lyrics(track, token)
        except LyricsError as e:
            raise ResolutionError(Stage.LYRICS, e) from e

        logger.info("Resolved %s - %s: %s lines (album %r)", artist, song, len(lines), track.album_name)
        return Song(title=song, artist=artist, album=track.album_name, lyrics_lines=tuple(lines))
