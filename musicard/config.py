"""Configuration: env, data paths, Spotify credentials, playback tuning."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of musicard package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SPOTIFY_CLIENT_ID etc. are set
load_dotenv(BASE_DIR / ".env")

STATE_DIR = Path(os.getenv("MUSICARD_STATE_DIR", str(BASE_DIR / "data")))
SONG_LISTS_DIR = Path(os.getenv("MUSICARD_DATA_DIR", str(STATE_DIR / "songs")))
SETTINGS_PATH = STATE_DIR / "settings.json"

# API
API_HOST = os.getenv("MUSICARD_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("MUSICARD_API_PORT", "8000"))

# Spotify (PKCE; the client id is the service token, the user token is stored after first login)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID", "")
SPOTIFY_REDIRECT_URI = os.getenv("SPOTIFY_REDIRECT_URI", "http://localhost:8000/api/spotify/callback")
SPOTIFY_SCOPES = os.getenv(
    "SPOTIFY_SCOPES",
    "user-read-playback-state user-modify-playback-state user-read-currently-playing",
)

# Settings store keys
USER_TOKEN_KEY = "spotify_user_token"
# Full Spotipy token info (access + refresh token, expiry) as JSON
TOKEN_INFO_KEY = "spotify_token_info"
DEFAULT_DEVICE_KEY = "default_device"

# Playback: start this far into a track (0.4 skips most intros)
START_OFFSET_FRACTION = float(os.getenv("MUSICARD_START_OFFSET_FRACTION", "0.4"))
SYNC_INTERVAL_SEC = float(os.getenv("MUSICARD_SYNC_INTERVAL_SEC", "0.5"))


def ensure_data_dir() -> None:
    STATE_DIR.mkdir(parents=True, exist_ok=True)
