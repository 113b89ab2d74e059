"""Tests for song list parsing, loading and lookup."""
import pytest

from musicard.core.errors import CatalogMiss, ExtractionFailure
from musicard.core.song_catalog import SongCatalog, default_sources, parse_entries
from musicard.models.song import CatalogEntry, SongCategory


def test_line_splits_on_first_hyphen():
    entry = CatalogEntry.from_line(1, SongCategory.STANDARD, "  Queen -  Bohemian Rhapsody ")
    assert entry.artist == "Queen"
    assert entry.title == "Bohemian Rhapsody"


def test_only_first_hyphen_splits():
    entry = CatalogEntry.from_line(1, SongCategory.STANDARD, "Jay-Z - Empire State of Mind")
    assert entry.artist == "Jay"
    assert entry.title == "Z - Empire State of Mind"


def test_line_without_separator_uses_whole_line():
    entry = CatalogEntry.from_line(3, SongCategory.XMAS, "  Silent Night ")
    assert entry.artist == "Silent Night"
    assert entry.title == "Silent Night"


def test_entry_identity_is_id_and_category():
    a = CatalogEntry(1, SongCategory.STANDARD, "Queen", "Bohemian Rhapsody")
    b = CatalogEntry(1, SongCategory.STANDARD, "Other", "Other")
    c = CatalogEntry(1, SongCategory.XMAS, "Queen", "Bohemian Rhapsody")
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


def test_parse_entries_skips_blank_lines():
    entries = parse_entries(SongCategory.STANDARD, "A - One\n\nB - Two\n")
    assert [(e.id, e.artist) for e in entries] == [(1, "A"), (2, "B")]


@pytest.fixture
def songs_dir(tmp_path):
    (tmp_path / "list.txt").write_text("Queen - Bohemian Rhapsody\nABBA - Dancing Queen\n", encoding="utf-8")
    (tmp_path / "movi.txt").write_text("Survivor - Eye of the Tiger\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def catalog(songs_dir):
    return SongCatalog().load(default_sources(songs_dir))


def test_resolve_in_range_returns_stored_entry(catalog):
    entry = catalog.resolve(SongCategory.STANDARD, 2)
    assert entry is catalog.entries(SongCategory.STANDARD)[1]
    assert (entry.artist, entry.title) == ("ABBA", "Dancing Queen")


def test_resolve_out_of_range_returns_none(catalog):
    assert catalog.resolve(SongCategory.STANDARD, 0) is None
    assert catalog.resolve(SongCategory.STANDARD, 3) is None
    assert catalog.resolve(SongCategory.STANDARD, -1) is None


def test_missing_source_leaves_only_that_list_empty(catalog):
    assert catalog.resolve(SongCategory.XMAS, 1) is None
    assert catalog.resolve(SongCategory.STANDARD, 1).artist == "Queen"
    assert catalog.resolve(SongCategory.MOVIES, 1).title == "Eye of the Tiger"
    assert any("xmas" in d for d in catalog.diagnostics)


def test_load_is_idempotent(songs_dir, catalog):
    (songs_dir / "xmas.txt").write_text("Wham! - Last Christmas\n", encoding="utf-8")
    catalog.load(default_sources(songs_dir))
    assert catalog.resolve(SongCategory.XMAS, 1) is None
    assert len(catalog) == 3


def test_unloaded_catalog_resolves_nothing():
    assert SongCatalog().resolve(SongCategory.STANDARD, 1) is None


def test_lookup(catalog):
    assert catalog.lookup("https://hitstergame.com/nl/00001").title == "Bohemian Rhapsody"
    assert catalog.lookup("https://hitstergame.com/nl/aaaa0027/00001").artist == "Survivor"


@pytest.mark.parametrize("code", ["garbage", "", "https://hitstergame.com/nl/00000"])
def test_lookup_unreadable_code_raises_extraction_failure(catalog, code):
    with pytest.raises(ExtractionFailure) as info:
        catalog.lookup(code)
    assert info.value.user_message == "No song found."


@pytest.mark.parametrize("code", ["abc99", "https://hitstergame.com/nl/aaaa0037/00001"])
def test_lookup_unknown_card_raises_catalog_miss(catalog, code):
    with pytest.raises(CatalogMiss) as info:
        catalog.lookup(code)
    assert info.value.user_message == "This card is not in the song list."
