"""Tests for the JSON settings store."""
from musicard.core.settings_store import SettingsStore


def test_set_get_delete(tmp_path):
    store = SettingsStore(tmp_path / "state" / "settings.json")
    assert store.get("spotify_user_token") is None
    store.set("spotify_user_token", "abc")
    assert SettingsStore(tmp_path / "state" / "settings.json").get("spotify_user_token") == "abc"
    store.delete("spotify_user_token")
    assert store.get("spotify_user_token") is None


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    store = SettingsStore(path)
    assert store.get("anything") is None
    store.set("k", "v")
    assert store.get("k") == "v"
