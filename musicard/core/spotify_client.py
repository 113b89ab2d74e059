"""Spotify collaborators via Spotipy: PKCE login, catalog search, Connect playback."""
import asyncio
import json
import logging
from typing import Dict, List, Optional

import requests
from spotipy import Spotify, SpotifyException
from spotipy.cache_handler import CacheHandler
from spotipy.oauth2 import SpotifyOauthError, SpotifyPKCE

from musicard.config import (
    DEFAULT_DEVICE_KEY,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_SCOPES,
    TOKEN_INFO_KEY,
    USER_TOKEN_KEY,
)
from musicard.core.errors import PlayerCommandFailure, UserTokenFetchFailed
from musicard.core.ports import KeyValueStore
from musicard.core.token_manager import TokenManager
from musicard.models.playback import AuthorizationStatus, OutputDevice, PlayerStatus
from musicard.models.song import ResolvedTrack

logger = logging.getLogger(__name__)


def _track_from_item(item: dict) -> ResolvedTrack:
    artists = item.get("artists") or []
    duration_ms = item.get("duration_ms")
    return ResolvedTrack(
        uri=item.get("uri", ""),
        name=item.get("name", ""),
        artist=", ".join(a.get("name", "") for a in artists),
        duration=duration_ms / 1000.0 if duration_ms else None,
    )


def _settle(future: asyncio.Future, result) -> None:
    if not future.done():
        future.set_result(result)


class StoreCacheHandler(CacheHandler):
    """Keeps Spotipy token info (including the refresh token) in the settings store.

    The current access token is mirrored under USER_TOKEN_KEY so a refresh is
    visible to the token manager after a restart.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def get_cached_token(self) -> Optional[dict]:
        raw = self._store.get(TOKEN_INFO_KEY)
        if not raw:
            return None
        try:
            token_info = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unreadable Spotify token info")
            return None
        return token_info if isinstance(token_info, dict) else None

    def save_token_to_cache(self, token_info: dict) -> None:
        self._store.set(TOKEN_INFO_KEY, json.dumps(token_info))
        if token_info.get("access_token"):
            self._store.set(USER_TOKEN_KEY, token_info["access_token"])


class SpotifyAuthorizer:
    """User consent via the Spotify PKCE flow.

    request_authorization() publishes the authorize URL and waits until the
    OAuth callback route calls complete(). Concurrent requests share one prompt.
    """

    def __init__(
        self,
        store: KeyValueStore,
        client_id: str = SPOTIFY_CLIENT_ID,
        redirect_uri: str = SPOTIFY_REDIRECT_URI,
        scope: str = SPOTIFY_SCOPES,
    ) -> None:
        self._store = store
        self._client_id = client_id
        self._redirect_uri = redirect_uri
        self._scope = scope
        self.cache_handler = StoreCacheHandler(store)
        self._oauth: Dict[str, SpotifyPKCE] = {}
        self._code: Optional[str] = None
        self._denied = False
        self._pending: Optional[asyncio.Future] = None

    def auth_manager(self, client_id: str) -> SpotifyPKCE:
        """The PKCE manager for client_id; it refreshes expired tokens from the store."""
        # The code verifier lives on the instance, so URL and exchange must share it
        if client_id not in self._oauth:
            self._oauth[client_id] = SpotifyPKCE(
                client_id=client_id,
                redirect_uri=self._redirect_uri,
                scope=self._scope,
                cache_handler=self.cache_handler,
                open_browser=False,
            )
        return self._oauth[client_id]

    def has_token_info(self) -> bool:
        return self.cache_handler.get_cached_token() is not None

    def authorize_url(self) -> Optional[str]:
        if not self._client_id:
            return None
        return self.auth_manager(self._client_id).get_authorize_url()

    @property
    def awaiting_callback(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def authorization_status(self) -> AuthorizationStatus:
        if self._denied:
            return AuthorizationStatus.DENIED
        if self._code or self._store.get(USER_TOKEN_KEY):
            return AuthorizationStatus.AUTHORIZED
        return AuthorizationStatus.NOT_DETERMINED

    async def request_authorization(self) -> AuthorizationStatus:
        status = await self.authorization_status()
        if status != AuthorizationStatus.NOT_DETERMINED:
            return status
        if not self.awaiting_callback:
            self._pending = asyncio.get_running_loop().create_future()
            logger.info("Spotify login required, open: %s", self.authorize_url())
        return await asyncio.shield(self._pending)

    def complete(self, code: Optional[str] = None, error: Optional[str] = None) -> AuthorizationStatus:
        """Record the outcome of the OAuth callback and wake any waiting request.

        Safe to call from any thread; the waiting future is settled on its own loop.
        """
        if code:
            self._code = code
            self._denied = False
            status = AuthorizationStatus.AUTHORIZED
        else:
            self._denied = True
            status = AuthorizationStatus.DENIED
            logger.info("Spotify login declined: %s", error or "no code")
        pending = self._pending
        if pending is not None and not pending.done():
            loop = pending.get_loop()
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is loop:
                _settle(pending, status)
            else:
                loop.call_soon_threadsafe(_settle, pending, status)
        return status

    def reset(self) -> None:
        """Forget consent state (logout)."""
        self._code = None
        self._denied = False
        self._oauth.clear()
        self._store.delete(TOKEN_INFO_KEY)

    async def fetch_user_token(self, service_token: str) -> str:
        code = self._code
        if not code:
            raise UserTokenFetchFailed("no authorization code")
        self._code = None  # codes are single use
        auth = self.auth_manager(service_token)
        return await asyncio.to_thread(auth.get_access_token, code, False)


class _SpotifyAccess:
    """Runs blocking Spotipy calls off the event loop.

    Clients are built on the authorizer's PKCE manager, so an expired access
    token is refreshed from the stored refresh token on the next call.
    """

    def __init__(self, tokens: TokenManager, authorizer: SpotifyAuthorizer) -> None:
        self._tokens = tokens
        self._authorizer = authorizer
        self._client: Optional[Spotify] = None
        self._client_id: Optional[str] = None

    def _spotify(self) -> Spotify:
        creds = self._tokens.cached_credentials()
        if creds is None or not self._authorizer.has_token_info():
            raise PlayerCommandFailure("Spotify not linked", http_status=401)
        if self._client is None or self._client_id != creds.service_token:
            self._client = Spotify(auth_manager=self._authorizer.auth_manager(creds.service_token))
            self._client_id = creds.service_token
        return self._client

    async def _call(self, method: str, *args, **kwargs):
        sp = self._spotify()
        try:
            return await asyncio.to_thread(getattr(sp, method), *args, **kwargs)
        except SpotifyException as e:
            raise PlayerCommandFailure(f"{method}: {e.msg}", http_status=e.http_status) from e
        except SpotifyOauthError as e:
            # refresh token revoked or expired; a new login is needed
            raise PlayerCommandFailure(f"{method}: {e}", http_status=401) from e
        except requests.RequestException as e:
            raise PlayerCommandFailure(f"{method}: {e}") from e


class SpotifyCatalog(_SpotifyAccess):
    async def search_tracks(self, query: str, limit: int = 1) -> List[ResolvedTrack]:
        result = await self._call("search", q=query, limit=limit, type="track")
        items = ((result or {}).get("tracks") or {}).get("items") or []
        return [_track_from_item(item) for item in items[:limit]]


class SpotifyPlayer(_SpotifyAccess):
    """Single-track Spotify Connect player.

    Spotify has no standalone queue: set_queue() and a seek() before the first
    play() are held back and sent together as one start_playback call.
    """

    def __init__(self, tokens: TokenManager, authorizer: SpotifyAuthorizer, store: KeyValueStore) -> None:
        super().__init__(tokens, authorizer)
        self._store = store
        self._device_id: Optional[str] = None
        self._pending_uri: Optional[str] = None
        self._pending_position: Optional[float] = None

    async def authorization_status(self) -> AuthorizationStatus:
        return await self._authorizer.authorization_status()

    async def request_authorization(self) -> AuthorizationStatus:
        return await self._authorizer.request_authorization()

    async def set_queue(self, track: ResolvedTrack) -> None:
        self._pending_uri = track.uri
        self._pending_position = None

    async def prepare_to_play(self) -> None:
        if self._device_id:
            return
        default = self._store.get(DEFAULT_DEVICE_KEY)
        devices = await self.devices()
        if default and any(d.id == default for d in devices):
            self._device_id = default
        else:
            active = [d for d in devices if d.is_active]
            chosen = active[0] if active else (devices[0] if devices else None)
            if chosen is None:
                raise PlayerCommandFailure("no Spotify device available")
            self._device_id = chosen.id
        logger.info("Player: using device %s", self._device_id)

    async def play(self) -> None:
        if self._pending_uri:
            position_ms = int(self._pending_position * 1000) if self._pending_position else None
            await self._call(
                "start_playback",
                device_id=self._device_id,
                uris=[self._pending_uri],
                position_ms=position_ms,
            )
            self._pending_uri = None
            self._pending_position = None
        else:
            await self._call("start_playback", device_id=self._device_id)

    async def pause(self) -> None:
        await self._call("pause_playback", device_id=self._device_id)

    async def seek(self, position: float) -> None:
        if self._pending_uri:
            self._pending_position = position
            return
        await self._call("seek_track", int(position * 1000), device_id=self._device_id)

    async def skip_to_previous(self) -> None:
        await self._call("previous_track", device_id=self._device_id)

    async def status(self) -> PlayerStatus:
        pb = await self._call("current_playback")
        if not pb:
            return PlayerStatus(position=0.0, duration=None, is_playing=False)
        item = pb.get("item") or {}
        duration_ms = item.get("duration_ms")
        return PlayerStatus(
            position=int(pb.get("progress_ms") or 0) / 1000.0,
            duration=duration_ms / 1000.0 if duration_ms else None,
            is_playing=bool(pb.get("is_playing", False)),
        )

    async def devices(self) -> List[OutputDevice]:
        result = await self._call("devices")
        return [
            OutputDevice(
                id=d.get("id") or "",
                name=d.get("name") or "",
                type=d.get("type") or "",
                is_active=bool(d.get("is_active")),
            )
            for d in (result or {}).get("devices") or []
            if d.get("id")
        ]

    async def select_device(self, device_id: str) -> None:
        await self._call("transfer_playback", device_id, force_play=False)
        self._device_id = device_id
        self._store.set(DEFAULT_DEVICE_KEY, device_id)
