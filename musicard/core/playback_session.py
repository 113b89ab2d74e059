"""Playback session: authorize, resolve, queue and play one track; mirror player state."""
import asyncio
import logging
from dataclasses import replace
from typing import Callable, List, Optional

from musicard.config import START_OFFSET_FRACTION, SYNC_INTERVAL_SEC
from musicard.core.errors import (
    MusicardError,
    PlaybackAuthorizationDenied,
    PlayerCommandFailure,
)
from musicard.core.ports import Player
from musicard.core.token_manager import TokenManager
from musicard.core.track_resolver import TrackResolver
from musicard.models.playback import (
    AuthorizationStatus,
    OutputDevice,
    PlaybackPhase,
    PlaybackSession,
)
from musicard.models.song import CatalogEntry, ResolvedTrack

logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Loading..."

# Phases the sync tick may flip between; all others belong to play()
_TRANSPORT_PHASES = (PlaybackPhase.PLAYING, PlaybackPhase.PAUSED)


class PlaybackSessionController:
    """Owns the session state and every command sent to the external player.

    All state changes happen on the event loop. play() runs at most once at a
    time; the sync loop only touches position, duration and the playing flag.
    """

    def __init__(
        self,
        player: Player,
        tokens: TokenManager,
        resolver: TrackResolver,
        *,
        start_offset_fraction: float = START_OFFSET_FRACTION,
        sync_interval: float = SYNC_INTERVAL_SEC,
    ) -> None:
        if not 0.0 <= start_offset_fraction < 1.0:
            raise ValueError("start_offset_fraction must be in [0, 1)")
        self._player = player
        self._tokens = tokens
        self._resolver = resolver
        self.start_offset_fraction = start_offset_fraction
        self.sync_interval = sync_interval
        self._session = PlaybackSession()
        self._play_in_progress = False
        self._listeners: List[Callable[[PlaybackSession], None]] = []
        self._sync_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    def snapshot(self) -> PlaybackSession:
        return self._session

    @property
    def play_in_progress(self) -> bool:
        return self._play_in_progress

    def add_listener(self, callback: Callable[[PlaybackSession], None]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[PlaybackSession], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _update(self, **changes) -> None:
        new = replace(self._session, **changes)
        if new == self._session:
            return
        self._session = new
        for callback in list(self._listeners):
            try:
                callback(new)
            except Exception as exc:
                logger.error("Listener error: %s", exc)

    # ------------------------------------------------------------------
    def start_offset(self, track: ResolvedTrack) -> Optional[float]:
        """Seconds into the track to start at, or None when the duration is unknown."""
        if not track.duration:
            return None
        return track.duration * self.start_offset_fraction

    async def play(self, entry: CatalogEntry) -> bool:
        """Authorize, resolve and start entry. Returns False if another play() is running.

        Failures never propagate: they set phase FAILED and a status message,
        leaving current_entry (and whatever it is playing) untouched.
        """
        if self._play_in_progress:
            logger.debug("Play: already in progress, dropping %s - %s", entry.artist, entry.title)
            return False
        self._play_in_progress = True
        logger.info("Play: starting %s - %s", entry.artist, entry.title)
        self._update(phase=PlaybackPhase.AUTHORIZING, status_message=LOADING_MESSAGE)
        try:
            await self._ensure_access()

            self._update(phase=PlaybackPhase.RESOLVING)
            track = await self._resolver.resolve(entry)
            logger.info("Play: found %s (%s)", track.name, track.uri)

            self._update(phase=PlaybackPhase.QUEUEING)
            await self._queue_and_play(track)

            changes = dict(
                phase=PlaybackPhase.PLAYING,
                current_entry=entry,
                is_playing=True,
                status_message="",
            )
            if track.duration:
                changes["total_duration"] = track.duration
            self._update(**changes)
            return True
        except MusicardError as e:
            logger.warning("Play: %s failed: %s", entry.search_term, e)
            if isinstance(e, PlayerCommandFailure) and e.http_status == 401:
                self._tokens.reset_user_token()
            self._update(phase=PlaybackPhase.FAILED, status_message=e.user_message)
            return True
        except Exception as e:
            logger.exception("Play: unexpected error for %s", entry.search_term)
            self._update(phase=PlaybackPhase.FAILED, status_message=f"Error: {e}")
            return True
        finally:
            self._play_in_progress = False

    async def _ensure_access(self) -> None:
        """Run the playback permission check and token acquisition side by side.

        Both branches finish before this returns. A token error wins over a
        permission error, since a declined login fails both.
        """
        auth_result, token_result = await asyncio.gather(
            self.ensure_authorization(),
            self._tokens.ensure_tokens(),
            return_exceptions=True,
        )
        for result in (token_result, auth_result):
            if isinstance(result, BaseException):
                raise result

    async def ensure_authorization(self) -> None:
        status = await self._player.authorization_status()
        if status == AuthorizationStatus.AUTHORIZED:
            return
        if status == AuthorizationStatus.NOT_DETERMINED:
            status = await self._player.request_authorization()
            if status == AuthorizationStatus.AUTHORIZED:
                return
        raise PlaybackAuthorizationDenied()

    async def _queue_and_play(self, track: ResolvedTrack) -> None:
        await self._player.set_queue(track)
        await self._player.prepare_to_play()
        offset = self.start_offset(track)
        if offset is not None:
            await self._player.seek(offset)
        await self._player.play()

    # ------------------------------------------------------------------
    async def toggle_play_pause(self) -> None:
        try:
            status = await self._player.status()
            if status.is_playing:
                await self._player.pause()
            else:
                await self._player.play()
        except Exception as e:
            logger.warning("Toggle play/pause failed: %s", e)

    async def seek(self, position: float) -> None:
        try:
            await self._player.seek(position)
        except Exception as e:
            logger.warning("Seek to %.1fs failed: %s", position, e)

    async def previous(self) -> None:
        try:
            await self._player.skip_to_previous()
        except Exception as e:
            logger.warning("Skip previous failed: %s", e)

    async def devices(self) -> List[OutputDevice]:
        return await self._player.devices()

    async def select_device(self, device_id: str) -> None:
        await self._player.select_device(device_id)
        logger.info("Output routed to device %s", device_id)

    # ------------------------------------------------------------------
    async def sync_once(self) -> None:
        """Pull position, duration and playing flag from the player into the session."""
        status = await self._player.status()
        changes = dict(current_position=status.position, is_playing=status.is_playing)
        if status.duration:
            changes["total_duration"] = status.duration
        if self._session.phase in _TRANSPORT_PHASES:
            changes["phase"] = PlaybackPhase.PLAYING if status.is_playing else PlaybackPhase.PAUSED
        self._update(**changes)

    async def _sync_loop(self) -> None:
        while True:
            try:
                await self.sync_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.debug("Sync tick failed: %s", e)
            await asyncio.sleep(self.sync_interval)

    def start(self) -> None:
        """Start the background sync loop on the running event loop."""
        if self._sync_task is not None and not self._sync_task.done():
            return
        self._sync_task = asyncio.create_task(self._sync_loop())
        logger.info("Playback sync loop started (interval %.1fs)", self.sync_interval)

    async def stop(self) -> None:
        if self._sync_task is None:
            return
        self._sync_task.cancel()
        try:
            await self._sync_task
        except asyncio.CancelledError:
            pass
        self._sync_task = None
        logger.info("Playback sync loop stopped")
