"""Error taxonomy. Each error carries the status text shown to the user."""
from typing import Optional


class MusicardError(Exception):
    """Base error; str(error) is the user-facing message."""
    user_message = "Something went wrong."

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(self.user_message if detail is None else f"{self.user_message} ({detail})")


class ExtractionFailure(MusicardError):
    user_message = "No song found."


class CatalogMiss(MusicardError):
    user_message = "This card is not in the song list."


class MissingServiceToken(MusicardError):
    user_message = "Add your Spotify client id (SPOTIFY_CLIENT_ID) to the configuration."


class UserTokenDenied(MusicardError):
    user_message = "Spotify access was denied."


class UserTokenFetchFailed(MusicardError):
    user_message = "Could not get a Spotify user token."


class PlaybackAuthorizationDenied(MusicardError):
    user_message = "Spotify access is required."


class TrackNotFound(MusicardError):
    user_message = "No catalog result found for this song."


class PlayerCommandFailure(MusicardError):
    user_message = "The player did not accept the command."

    def __init__(self, detail: Optional[str] = None, http_status: Optional[int] = None) -> None:
        self.http_status = http_status
        super().__init__(detail)
