from __future__ import annotations

import logging
from typing import Any

import requests

from lyricsync.config import DEFAULT_LYRICS_URL
from lyricsync.errors import LyricsHttpStatusError, LyricsTransportError, MalformedLyricsError
from lyricsync.lyrics.model import LyricLine
from lyricsync.lyrics.parse import parse_lyrics_document

from .base import HttpStage
from .types import TrackIdentifier

logger = logging.getLogger(__name__)


class LyricsFetcher(HttpStage):
    def __init__(self, *, lyrics_url: str = DEFAULT_LYRICS_URL, **kwargs: Any):
        super().__init__(**kwargs)
        self.lyrics_url = lyrics_url.rstrip("/")

    def lyrics_endpoint(self, track_id: str) -> str:
        return f"{self.lyrics_url}/{requests.utils.quote(track_id, safe='')}?format=json&market=from_token"

    def fetch_lyrics(self, track: TrackIdentifier, token: str) -> tuple[LyricLine, ...]:
        headers = {**self._client_headers(), **self._bearer(token)}
        try:
            r = self._get(self.lyrics_endpoint(track.track_id), headers)
        except requests.RequestException as e:
            logger.warning("Error fetching lyrics: %s", e)
            raise LyricsTransportError(str(e)) from e

        # 404 means "no lyrics for this track", still a failure for the caller
        if not 200 <= r.status_code < 300:
            logger.warning("Lyrics endpoint HTTP error: %s", r.status_code)
            raise LyricsHttpStatusError(r.status_code)

        try:
            doc = r.json()
        except ValueError as e:
            raise MalformedLyricsError("lyrics response is not JSON") from e
        logger.debug("Lyrics JSON for %s: %s", track.track_id, doc)

        return parse_lyrics_document(doc)
