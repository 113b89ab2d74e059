"""Bundled song lists: load once, resolve (category, id) to an entry."""
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from musicard.core.errors import CatalogMiss, ExtractionFailure
from musicard.core.identifier import extract_card_code
from musicard.models.song import CatalogEntry, SongCategory

logger = logging.getLogger(__name__)

LIST_FILENAMES: Dict[SongCategory, str] = {
    SongCategory.STANDARD: "list.txt",
    SongCategory.XMAS: "xmas.txt",
    SongCategory.MOVIES: "movi.txt",
    SongCategory.SCHLAGER: "schl.txt",
    SongCategory.GUILTY_PLEASURE: "gupl.txt",
}


def default_sources(data_dir: Path) -> Dict[SongCategory, Path]:
    """Map every category to its list file in data_dir."""
    return {category: data_dir / name for category, name in LIST_FILENAMES.items()}


def parse_entries(category: SongCategory, raw: str) -> Tuple[CatalogEntry, ...]:
    """One entry per non-empty line, numbered from 1."""
    lines = [line for line in raw.splitlines() if line]
    return tuple(
        CatalogEntry.from_line(index + 1, category, line) for index, line in enumerate(lines)
    )


class SongCatalog:
    """All song lists keyed by category. Immutable after load()."""

    def __init__(self) -> None:
        self._lists: Dict[SongCategory, Tuple[CatalogEntry, ...]] = {}
        self._loaded = False
        self.diagnostics: List[str] = []

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, sources: Mapping[SongCategory, Path]) -> "SongCatalog":
        """Read each category's list. A missing or unreadable file leaves that list empty."""
        if self._loaded:
            logger.debug("Catalog already loaded, ignoring load()")
            return self
        for category in SongCategory:
            path = sources.get(category)
            self._lists[category] = self._load_list(category, path)
        self._loaded = True
        logger.info(
            "Catalog loaded: %s",
            ", ".join(f"{c.value}={len(self._lists[c])}" for c in SongCategory),
        )
        return self

    def _load_list(self, category: SongCategory, path: Optional[Path]) -> Tuple[CatalogEntry, ...]:
        if path is None:
            self._record(f"No source configured for {category.value}")
            return ()
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            self._record(f"Missing {Path(path).name} for {category.value}")
            return ()
        except (OSError, UnicodeDecodeError) as e:
            self._record(f"Failed to load {Path(path).name} for {category.value}: {e}")
            return ()
        return parse_entries(category, raw)

    def _record(self, message: str) -> None:
        self.diagnostics.append(message)
        logger.warning("Catalog: %s", message)

    def entries(self, category: SongCategory) -> Tuple[CatalogEntry, ...]:
        return self._lists.get(category, ())

    def resolve(self, category: SongCategory, id_: int) -> Optional[CatalogEntry]:
        """Return the entry at 1-based position id_, or None when out of range."""
        entries = self.entries(category)
        if not 1 <= id_ <= len(entries):
            return None
        return entries[id_ - 1]

    def lookup(self, code: str) -> CatalogEntry:
        """Resolve a scanned code to an entry.

        Raises ExtractionFailure when no card number can be read from the code
        and CatalogMiss when the number is not in its list.
        """
        parsed = extract_card_code(code)
        if parsed is None:
            raise ExtractionFailure(repr(code))
        category, id_ = parsed
        entry = self.resolve(category, id_)
        if entry is None:
            raise CatalogMiss(f"{category.value} #{id_}")
        return entry

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._lists.values())
