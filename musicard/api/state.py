"""Shared application state (injected into routes)."""
from musicard.config import SETTINGS_PATH, SONG_LISTS_DIR
from musicard.core.playback_session import PlaybackSessionController
from musicard.core.scan_handler import ScanHandler
from musicard.core.settings_store import SettingsStore
from musicard.core.song_catalog import SongCatalog, default_sources
from musicard.core.spotify_client import SpotifyAuthorizer, SpotifyCatalog, SpotifyPlayer
from musicard.core.token_manager import TokenManager
from musicard.core.track_resolver import TrackResolver


class AppState:
    """Builds the single instance of every service and wires them together."""

    def __init__(self) -> None:
        self.store = SettingsStore(SETTINGS_PATH)
        self.catalog = SongCatalog()
        self.authorizer = SpotifyAuthorizer(self.store)
        self.tokens = TokenManager(self.authorizer, self.store)
        self.resolver = TrackResolver(SpotifyCatalog(self.tokens, self.authorizer))
        self.player = SpotifyPlayer(self.tokens, self.authorizer, self.store)
        self.controller = PlaybackSessionController(self.player, self.tokens, self.resolver)
        self.scan_handler = ScanHandler(self.catalog, self.controller)

    def load_catalog(self) -> None:
        self.catalog.load(default_sources(SONG_LISTS_DIR))

    async def startup(self) -> None:
        self.load_catalog()
        self.controller.start()

    async def shutdown(self) -> None:
        await self.controller.stop()

    def logout(self) -> None:
        self.tokens.reset_user_token()
        self.authorizer.reset()


_state = AppState()


def get_state() -> AppState:
    return _state
