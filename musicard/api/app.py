"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from musicard.api.state import AppState, get_state
from musicard.config import ensure_data_dir

# Import routes after state to avoid circular imports
from musicard.api.routes import catalog, devices, playback, scan, spotify

__all__ = ["app", "AppState", "get_state"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    state = get_state()
    await state.startup()
    yield
    await state.shutdown()


app = FastAPI(
    title="musicard API",
    description="Scan a song card, play it on Spotify",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scan.router, prefix="/api/scan", tags=["scan"])
app.include_router(catalog.router, prefix="/api/catalog", tags=["catalog"])
app.include_router(playback.router, prefix="/api/playback", tags=["playback"])
app.include_router(devices.router, prefix="/api/devices", tags=["devices"])
app.include_router(spotify.router, prefix="/api/spotify", tags=["spotify"])
