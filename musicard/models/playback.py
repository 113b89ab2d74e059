"""Playback session state, player status and credentials."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from musicard.models.song import CatalogEntry


class PlaybackPhase(str, Enum):
    IDLE = "idle"
    AUTHORIZING = "authorizing"
    RESOLVING = "resolving"
    QUEUEING = "queueing"
    PLAYING = "playing"
    PAUSED = "paused"
    FAILED = "failed"


class AuthorizationStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"
    RESTRICTED = "restricted"


@dataclass(frozen=True)
class PlaybackSession:
    """Snapshot of the live session exposed to the presentation layer."""
    phase: PlaybackPhase = PlaybackPhase.IDLE
    current_entry: Optional[CatalogEntry] = None
    is_playing: bool = False
    current_position: float = 0.0
    total_duration: float = 1.0
    status_message: str = ""

    @property
    def formatted_position(self) -> str:
        return format_time(self.current_position)

    @property
    def formatted_duration(self) -> str:
        return format_time(self.total_duration)


@dataclass(frozen=True)
class PlayerStatus:
    """What the external player reports on a sync tick."""
    position: float
    duration: Optional[float]
    is_playing: bool


@dataclass(frozen=True)
class Credentials:
    service_token: str
    user_token: str


@dataclass(frozen=True)
class OutputDevice:
    """Spotify Connect device audio can be routed to."""
    id: str
    name: str
    type: str
    is_active: bool


def format_time(seconds: float) -> str:
    """Render seconds as m:ss."""
    total = int(max(seconds, 0))
    return f"{total // 60}:{total % 60:02d}"
