"""Scanned card codes from the camera client."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from musicard.api.routes.serializers import session_to_dict
from musicard.api.state import AppState, get_state

router = APIRouter()


class ScanBody(BaseModel):
    code: str


@router.post("")
async def scan(body: ScanBody, state: AppState = Depends(get_state)):
    """Resolve and play a scanned code. accepted=False when a previous scan is still being handled."""
    accepted = await state.scan_handler.handle_scan(body.code)
    return {
        "accepted": accepted,
        "message": state.scan_handler.message,
        "session": session_to_dict(state.controller.snapshot()),
    }


@router.get("/message")
def scan_message(state: AppState = Depends(get_state)):
    return {"message": state.scan_handler.message, "busy": state.scan_handler.busy}
