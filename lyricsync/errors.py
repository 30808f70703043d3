from __future__ import annotations

from lyricsync.sources.types import Stage


class LyricSyncError(RuntimeError):
    pass


class TokenError(LyricSyncError):
    pass


class TokenTransportError(TokenError):
    pass


class MissingTokenError(TokenError):
    pass


class TrackError(LyricSyncError):
    pass


class TrackTransportError(TrackError):
    pass


class TrackNotFoundError(TrackError):
    pass


class LyricsError(LyricSyncError):
    pass


class LyricsTransportError(LyricsError):
    pass


class LyricsHttpStatusError(LyricsError):
    def __init__(self, status_code: int):
        super().__init__(f"lyrics endpoint returned HTTP {status_code}")
        self.status_code = status_code


class MalformedLyricsError(LyricsError):
    pass


class ResolutionError(LyricSyncError):
    """A pipeline stage failed; `cause` is the stage's own error."""

    def __init__(self, stage: Stage, cause: LyricSyncError):
        super().__init__(f"{stage.value} stage failed: {cause}")
        self.stage = stage
        self.cause = cause
