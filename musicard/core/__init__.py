"""Core services: catalog, tokens, track resolution, playback session, Spotify."""
from musicard.core.playback_session import PlaybackSessionController
from musicard.core.scan_handler import ScanHandler
from musicard.core.song_catalog import SongCatalog
from musicard.core.token_manager import TokenManager
from musicard.core.track_resolver import TrackResolver

__all__ = [
    "PlaybackSessionController",
    "ScanHandler",
    "SongCatalog",
    "TokenManager",
    "TrackResolver",
]
