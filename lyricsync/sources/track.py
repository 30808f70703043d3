from __future__ import annotations

import logging
from typing import Any

import requests

from lyricsync.config import DEFAULT_SEARCH_URL
from lyricsync.errors import TrackNotFoundError, TrackTransportError

from .base import HttpStage
from .types import TrackIdentifier

logger = logging.getLogger(__name__)


def build_search_query(song: str, artist: str) -> str:
    return requests.utils.quote(f"track:{song} artist:{artist}", safe=":")


class TrackResolver(HttpStage):
    def __init__(self, *, search_url: str = DEFAULT_SEARCH_URL, **kwargs: Any):
        super().__init__(**kwargs)
        self.search_url = search_url

    def resolve_track(self, song: str, artist: str, token: str) -> TrackIdentifier:
        # the first hit is taken as is, no re-ranking on our side
        url = f"{self.search_url}?q={build_search_query(song, artist)}&type=track&limit=1"
        try:
            r = self._get(url, self._bearer(token))
        except requests.RequestException as e:
            logger.warning("Failed to fetch track ID: %s", e)
            raise TrackTransportError(str(e)) from e

        try:
            items = r.json()["tracks"]["items"]
            first = items[0]
            track_id = first["id"]
            album_name = first["album"]["name"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.info("No track found for %r by %r (HTTP %s)", song, artist, r.status_code)
            raise TrackNotFoundError(f"no track found for {artist} - {song}") from e

        if not isinstance(track_id, str) or not isinstance(album_name, str):
            raise TrackNotFoundError(f"unexpected search result for {artist} - {song}")

        logger.debug("Resolved %s - %s to track %s", artist, song, track_id)
        return TrackIdentifier(track_id=track_id, album_name=album_name)
