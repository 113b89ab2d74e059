"""Find the Spotify track for a catalog entry, caching by entry identity."""
import logging
from typing import Dict, Optional

from musicard.core.errors import MusicardError, PlayerCommandFailure, TrackNotFound
from musicard.core.ports import TrackSearch
from musicard.models.song import CatalogEntry, ResolvedTrack

logger = logging.getLogger(__name__)


class TrackResolver:
    def __init__(self, search: TrackSearch) -> None:
        self._search = search
        self._cache: Dict[CatalogEntry, ResolvedTrack] = {}

    def cached(self, entry: CatalogEntry) -> Optional[ResolvedTrack]:
        return self._cache.get(entry)

    async def resolve(self, entry: CatalogEntry) -> ResolvedTrack:
        """Return the first search hit for "<artist> <title>"; raises TrackNotFound if none."""
        cached = self._cache.get(entry)
        if cached is not None:
            return cached

        try:
            results = await self._search.search_tracks(entry.search_term, limit=1)
        except MusicardError:
            raise
        except Exception as e:
            raise PlayerCommandFailure(f"search failed: {e}") from e
        if not results:
            logger.info("Resolver: no match for %r", entry.search_term)
            raise TrackNotFound(entry.search_term)

        # A concurrent resolve may have filled the slot while we awaited the search
        track = self._cache.setdefault(entry, results[0])
        logger.debug("Resolver: %s -> %s", entry.search_term, track.uri)
        return track
