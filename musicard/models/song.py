"""Song list categories and catalog entries."""
from dataclasses import dataclass, field
from enum import Enum


class SongCategory(str, Enum):
    """One of the independent song lists a card can belong to."""
    STANDARD = "standard"
    XMAS = "xmas"
    MOVIES = "movies"
    SCHLAGER = "schlager"
    GUILTY_PLEASURE = "guilty_pleasure"


@dataclass(frozen=True)
class CatalogEntry:
    """One line of a song list. Equal (and hashed) by id and category only."""
    id: int
    category: SongCategory
    artist: str = field(compare=False)
    title: str = field(compare=False)

    @classmethod
    def from_line(cls, id_: int, category: SongCategory, raw_line: str) -> "CatalogEntry":
        """Split "Artist - Title" on the first hyphen; fall back to the whole line for both."""
        full = raw_line.strip()
        parts = [p for p in raw_line.split("-", 1) if p]
        artist = parts[0].strip() if parts else full
        title = parts[1].strip() if len(parts) > 1 else full
        return cls(id=id_, category=category, artist=artist, title=title)

    @property
    def search_term(self) -> str:
        return f"{self.artist} {self.title}"


@dataclass(frozen=True)
class ResolvedTrack:
    """Streamable track found in the Spotify catalog for an entry."""
    uri: str
    name: str
    artist: str
    duration: float | None  # seconds
