"""Shared JSON shapes for route responses."""
from typing import Optional

from musicard.models.playback import PlaybackSession
from musicard.models.song import CatalogEntry


def entry_to_dict(entry: Optional[CatalogEntry]) -> Optional[dict]:
    if entry is None:
        return None
    return {
        "id": entry.id,
        "category": entry.category.value,
        "artist": entry.artist,
        "title": entry.title,
    }


def session_to_dict(session: PlaybackSession) -> dict:
    return {
        "phase": session.phase.value,
        "current_entry": entry_to_dict(session.current_entry),
        "is_playing": session.is_playing,
        "current_position": session.current_position,
        "total_duration": session.total_duration,
        "formatted_position": session.formatted_position,
        "formatted_duration": session.formatted_duration,
        "status_message": session.status_message,
    }
