"""Output route: list Spotify Connect devices and move playback to one."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from musicard.api.state import AppState, get_state
from musicard.core.errors import PlayerCommandFailure

router = APIRouter()


class SelectDeviceBody(BaseModel):
    device_id: str


@router.get("")
async def list_devices(state: AppState = Depends(get_state)):
    try:
        devices = await state.controller.devices()
    except PlayerCommandFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
    return [
        {"id": d.id, "name": d.name, "type": d.type, "is_active": d.is_active}
        for d in devices
    ]


@router.post("/select")
async def select_device(body: SelectDeviceBody, state: AppState = Depends(get_state)):
    """Route audio to device_id; it also becomes the default for later sessions."""
    try:
        await state.controller.select_device(body.device_id)
    except PlayerCommandFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True, "device_id": body.device_id}
