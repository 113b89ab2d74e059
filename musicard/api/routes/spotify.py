"""Spotify OAuth: auth URL, callback and logout."""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from musicard.api.state import AppState, get_state
from musicard.config import SPOTIFY_CLIENT_ID
from musicard.models.playback import AuthorizationStatus

router = APIRouter()


@router.get("/auth-url")
def get_auth_url(state: AppState = Depends(get_state)):
    """Return the Spotify authorization URL and whether the user is logged in."""
    if not SPOTIFY_CLIENT_ID:
        return {"auth_url": None, "error": "SPOTIFY_CLIENT_ID not set", "logged_in": False}
    return {
        "auth_url": state.authorizer.authorize_url(),
        "logged_in": state.tokens.cached_credentials() is not None,
        "awaiting_callback": state.authorizer.awaiting_callback,
    }


@router.get("/callback")
async def spotify_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    """Hand the authorization outcome to whoever is waiting for it."""
    status = state.authorizer.complete(code=code, error=error)
    if status == AuthorizationStatus.AUTHORIZED:
        return HTMLResponse(
            "<body><p>Spotify linked successfully. You can close this window.</p></body>"
        )
    return HTMLResponse(
        "<body><p>Spotify access was denied. Scan a card to try again.</p></body>",
        status_code=400,
    )


@router.post("/logout")
def logout(state: AppState = Depends(get_state)):
    """Clear the Spotify user token so the next scan asks for login again."""
    state.logout()
    return {"ok": True}
