"""Interfaces of the external collaborators the playback core talks to."""
from typing import List, Optional, Protocol

from musicard.models.playback import AuthorizationStatus, OutputDevice, PlayerStatus
from musicard.models.song import ResolvedTrack


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class Authorizer(Protocol):
    """Permission status plus the user-token fetch."""

    async def authorization_status(self) -> AuthorizationStatus: ...

    async def request_authorization(self) -> AuthorizationStatus: ...

    async def fetch_user_token(self, service_token: str) -> str: ...


class TrackSearch(Protocol):
    async def search_tracks(self, query: str, limit: int = 1) -> List[ResolvedTrack]: ...


class Player(Protocol):
    async def authorization_status(self) -> AuthorizationStatus: ...

    async def request_authorization(self) -> AuthorizationStatus: ...

    async def set_queue(self, track: ResolvedTrack) -> None: ...

    async def prepare_to_play(self) -> None: ...

    async def play(self) -> None: ...

    async def pause(self) -> None: ...

    async def seek(self, position: float) -> None: ...

    async def skip_to_previous(self) -> None: ...

    async def status(self) -> PlayerStatus: ...

    async def devices(self) -> List[OutputDevice]: ...

    async def select_device(self, device_id: str) -> None: ...
