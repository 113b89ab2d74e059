"""Fake collaborators for the playback core.

Each fake yields to the event loop before answering so concurrent callers
really interleave.
"""
import asyncio
from typing import Dict, List, Optional

import pytest

from musicard.core.playback_session import PlaybackSessionController
from musicard.core.token_manager import TokenManager
from musicard.core.track_resolver import TrackResolver
from musicard.models.playback import AuthorizationStatus, OutputDevice, PlayerStatus
from musicard.models.song import CatalogEntry, ResolvedTrack, SongCategory


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data = dict(data or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


class FakeAuthorizer:
    def __init__(self, status=AuthorizationStatus.NOT_DETERMINED, request_result=AuthorizationStatus.AUTHORIZED):
        self.status = status
        self.request_result = request_result
        self.token = "user-token"
        self.fetch_error: Optional[Exception] = None
        self.request_calls = 0
        self.fetch_calls: List[str] = []

    async def authorization_status(self):
        await asyncio.sleep(0)
        return self.status

    async def request_authorization(self):
        self.request_calls += 1
        await asyncio.sleep(0.01)
        self.status = self.request_result
        return self.status

    async def fetch_user_token(self, service_token):
        self.fetch_calls.append(service_token)
        await asyncio.sleep(0.01)
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.token


class FakeSearch:
    def __init__(self, results: Optional[Dict[str, List[ResolvedTrack]]] = None) -> None:
        self.results = results or {}
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    async def search_tracks(self, query, limit=1):
        self.calls.append((query, limit))
        await asyncio.sleep(0.01)
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))[:limit]


class FakePlayer:
    def __init__(self) -> None:
        self.auth_status = AuthorizationStatus.AUTHORIZED
        self.request_result = AuthorizationStatus.AUTHORIZED
        self.calls: List[tuple] = []
        self.failures: Dict[str, Exception] = {}
        self.player_status = PlayerStatus(position=0.0, duration=None, is_playing=False)
        self.device_list = [OutputDevice(id="dev-1", name="Kitchen", type="Speaker", is_active=True)]

    async def _record(self, name, *args):
        await asyncio.sleep(0)
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def authorization_status(self):
        return self.auth_status

    async def request_authorization(self):
        self.auth_status = self.request_result
        return self.auth_status

    async def set_queue(self, track):
        await self._record("set_queue", track.uri)

    async def prepare_to_play(self):
        await self._record("prepare_to_play")

    async def play(self):
        await self._record("play")

    async def pause(self):
        await self._record("pause")

    async def seek(self, position):
        await self._record("seek", position)

    async def skip_to_previous(self):
        await self._record("skip_to_previous")

    async def status(self):
        await self._record("status")
        return self.player_status

    async def devices(self):
        await self._record("devices")
        return list(self.device_list)

    async def select_device(self, device_id):
        await self._record("select_device", device_id)


QUEEN = CatalogEntry(id=1, category=SongCategory.STANDARD, artist="Queen", title="Bohemian Rhapsody")
ABBA = CatalogEntry(id=2, category=SongCategory.STANDARD, artist="ABBA", title="Dancing Queen")
QUEEN_TRACK = ResolvedTrack(uri="spotify:track:queen", name="Bohemian Rhapsody", artist="Queen", duration=360.0)
ABBA_TRACK = ResolvedTrack(uri="spotify:track:abba", name="Dancing Queen", artist="ABBA", duration=230.0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def authorizer():
    return FakeAuthorizer()


@pytest.fixture
def search():
    return FakeSearch({
        "Queen Bohemian Rhapsody": [QUEEN_TRACK],
        "ABBA Dancing Queen": [ABBA_TRACK],
    })


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def tokens(authorizer, store):
    return TokenManager(authorizer, store, load_service_token=lambda: "service-token")


@pytest.fixture
def resolver(search):
    return TrackResolver(search)


@pytest.fixture
def controller(player, tokens, resolver):
    return PlaybackSessionController(player, tokens, resolver, start_offset_fraction=0.4, sync_interval=0.01)
