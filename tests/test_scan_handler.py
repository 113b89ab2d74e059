"""Tests for the scan debounce gate."""
import asyncio

import pytest

from musicard.core.errors import ExtractionFailure, UserTokenDenied
from musicard.core.scan_handler import LOADING_SONG, NOW_PLAYING, SCAN_PROMPT, ScanHandler
from musicard.core.song_catalog import SongCatalog, default_sources
from musicard.models.playback import AuthorizationStatus


@pytest.fixture
def catalog(tmp_path):
    (tmp_path / "list.txt").write_text("Queen - Bohemian Rhapsody\nABBA - Dancing Queen\n", encoding="utf-8")
    return SongCatalog().load(default_sources(tmp_path))


@pytest.fixture
def handler(catalog, controller):
    return ScanHandler(catalog, controller)


def test_starts_with_prompt(handler):
    assert handler.message == SCAN_PROMPT
    assert handler.busy is False


def test_unknown_code_reports_no_match(handler, player):
    assert asyncio.run(handler.handle_scan("https://hitstergame.com/nl/00099")) is True
    assert handler.message == ExtractionFailure.user_message
    assert handler.busy is False
    assert player.calls == []


def test_scan_plays_song(handler, controller):
    asyncio.run(handler.handle_scan("https://hitstergame.com/nl/00001"))
    assert handler.message == NOW_PLAYING
    assert controller.snapshot().current_entry.title == "Bohemian Rhapsody"


def test_scans_during_handling_are_dropped(handler, search, controller):
    messages = []

    async def run():
        first = asyncio.create_task(handler.handle_scan("https://hitstergame.com/nl/00001"))
        await asyncio.sleep(0)
        messages.append(handler.message)
        second = await handler.handle_scan("https://hitstergame.com/nl/00002")
        return await first, second

    first, second = asyncio.run(run())
    assert (first, second) == (True, False)
    assert messages == [LOADING_SONG]
    assert len(search.calls) == 1
    assert controller.snapshot().current_entry.artist == "Queen"


def test_failed_play_shows_session_message(handler, authorizer):
    authorizer.status = AuthorizationStatus.DENIED
    asyncio.run(handler.handle_scan("abc2"))
    assert handler.message == UserTokenDenied.user_message
    assert handler.busy is False


def test_reset(handler):
    asyncio.run(handler.handle_scan("nothing"))
    handler.reset()
    assert handler.message == SCAN_PROMPT


def test_unreadable_code_reports_no_match(handler, player):
    assert asyncio.run(handler.handle_scan("no digits here")) is True
    assert handler.message == ExtractionFailure.user_message
    assert player.calls == []
