"""Playback session state and transport controls."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from musicard.api.routes.serializers import session_to_dict
from musicard.api.state import AppState, get_state

router = APIRouter()


class SeekBody(BaseModel):
    position: float  # seconds


@router.get("")
def get_playback(state: AppState = Depends(get_state)):
    """Return the current session snapshot (kept in sync with Spotify by the sync loop)."""
    return session_to_dict(state.controller.snapshot())


@router.post("/toggle")
async def toggle(state: AppState = Depends(get_state)):
    await state.controller.toggle_play_pause()
    return {"ok": True}


@router.post("/seek")
async def seek(body: SeekBody, state: AppState = Depends(get_state)):
    await state.controller.seek(body.position)
    return {"ok": True}


@router.post("/previous")
async def previous(state: AppState = Depends(get_state)):
    await state.controller.previous()
    return {"ok": True}
