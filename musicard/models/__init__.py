"""Data models for songs, playback and credentials."""
from musicard.models.playback import (
    AuthorizationStatus,
    Credentials,
    OutputDevice,
    PlaybackPhase,
    PlaybackSession,
    PlayerStatus,
)
from musicard.models.song import CatalogEntry, ResolvedTrack, SongCategory

__all__ = [
    "AuthorizationStatus",
    "CatalogEntry",
    "Credentials",
    "OutputDevice",
    "PlaybackPhase",
    "PlaybackSession",
    "PlayerStatus",
    "ResolvedTrack",
    "SongCategory",
]
