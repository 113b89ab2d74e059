"""Card-scanning music player backed by Spotify."""
