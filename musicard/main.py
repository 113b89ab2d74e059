"""Entry: start API server (playback sync runs in the app lifespan)."""
import logging
import uvicorn

from musicard.config import API_HOST, API_PORT

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    uvicorn.run(
        "musicard.api.app:app",
        host=API_HOST,
        port=API_PORT,
    )
