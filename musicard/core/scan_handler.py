"""Debounce gate between the scanner and the playback session."""
import logging

from musicard.core.errors import CatalogMiss, ExtractionFailure
from musicard.core.playback_session import PlaybackSessionController
from musicard.core.song_catalog import SongCatalog
from musicard.models.playback import PlaybackPhase

logger = logging.getLogger(__name__)

SCAN_PROMPT = "Scan a card to start"
LOADING_SONG = "Loading song..."
NOW_PLAYING = "Now playing"


class ScanHandler:
    """Turns scanned codes into play() calls, ignoring scans while one is handled."""

    def __init__(self, catalog: SongCatalog, controller: PlaybackSessionController) -> None:
        self._catalog = catalog
        self._controller = controller
        self._handling = False
        self.message = SCAN_PROMPT

    @property
    def busy(self) -> bool:
        return self._handling

    async def handle_scan(self, code: str) -> bool:
        """Handle one scanned code. Returns False when the scan was dropped."""
        if self._handling:
            return False
        self._handling = True
        try:
            try:
                entry = self._catalog.lookup(code)
            except (ExtractionFailure, CatalogMiss) as e:
                logger.info("Scan: no song for %r: %s", code, e)
                # a miss reads the same as an unreadable card on the display
                self.message = ExtractionFailure.user_message
                return True

            self.message = LOADING_SONG
            if not await self._controller.play(entry):
                return False
            session = self._controller.snapshot()
            if session.phase == PlaybackPhase.FAILED:
                self.message = session.status_message
            else:
                self.message = NOW_PLAYING
            return True
        finally:
            self._handling = False

    def reset(self) -> None:
        self.message = SCAN_PROMPT
        self._handling = False
