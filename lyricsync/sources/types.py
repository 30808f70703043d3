from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NewType

BearerToken = NewType("BearerToken", str)


class Stage(str, Enum):
    TOKEN = "token"
    TRACK = "track"
    LYRICS = "lyrics"


@dataclass(frozen=True, slots=True)
class TrackIdentifier:
    """Catalog key of the best search hit, valid for one pipeline run."""
    track_id: str
    album_name: str
