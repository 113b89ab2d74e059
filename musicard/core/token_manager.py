"""Service and user token acquisition, cached in memory and on disk."""
import asyncio
import logging
from typing import Callable, Optional

from musicard.config import SPOTIFY_CLIENT_ID, TOKEN_INFO_KEY, USER_TOKEN_KEY
from musicard.core.errors import (
    MissingServiceToken,
    MusicardError,
    UserTokenDenied,
    UserTokenFetchFailed,
)
from musicard.core.ports import Authorizer, KeyValueStore
from musicard.models.playback import AuthorizationStatus, Credentials

logger = logging.getLogger(__name__)


class TokenManager:
    """Hands out Credentials; only one acquisition sequence runs at a time."""

    def __init__(
        self,
        authorizer: Authorizer,
        store: KeyValueStore,
        load_service_token: Callable[[], Optional[str]] = lambda: SPOTIFY_CLIENT_ID,
    ) -> None:
        self._authorizer = authorizer
        self._store = store
        self._load_service_token = load_service_token
        self._service_token: Optional[str] = None
        self._user_token: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    async def ensure_tokens(self) -> Credentials:
        """Return both tokens, running the authorization flow if no user token is known.

        Callers arriving while another acquisition runs wait for it and then
        reuse whatever it cached.
        """
        async with self._lock:
            if not self._service_token:
                self._service_token = self._read_service_token()

            if not self._user_token:
                self._user_token = await self._ensure_user_token(self._service_token)

            if not self._service_token:
                raise MissingServiceToken()
            if not self._user_token:
                raise UserTokenFetchFailed()
            return Credentials(service_token=self._service_token, user_token=self._user_token)

    def cached_credentials(self) -> Optional[Credentials]:
        """Credentials already on hand (memory or disk), without starting any flow."""
        service = self._service_token or self._load_service_token()
        user = self._user_token or self._store.get(USER_TOKEN_KEY)
        if not service or not user:
            return None
        return Credentials(service_token=service, user_token=user)

    def reset_user_token(self) -> None:
        """Forget the user token (e.g. after the player rejected it)."""
        logger.info("Token: clearing user token")
        self._user_token = None
        self._store.delete(USER_TOKEN_KEY)
        self._store.delete(TOKEN_INFO_KEY)

    def _read_service_token(self) -> str:
        token = self._load_service_token()
        if not token:
            raise MissingServiceToken()
        return token

    async def _ensure_user_token(self, service_token: str) -> str:
        stored = self._store.get(USER_TOKEN_KEY)
        if stored:
            logger.debug("Token: using stored user token")
            return stored

        await self._ensure_permission()
        try:
            token = await self._authorizer.fetch_user_token(service_token)
        except MusicardError:
            raise
        except Exception as e:
            logger.warning("Token: user token fetch failed: %s", e)
            raise UserTokenFetchFailed(str(e)) from e
        if not token:
            raise UserTokenFetchFailed()

        self._store.set(USER_TOKEN_KEY, token)
        logger.info("Token: user token acquired and stored")
        return token

    async def _ensure_permission(self) -> None:
        status = await self._authorizer.authorization_status()
        if status == AuthorizationStatus.AUTHORIZED:
            return
        if status == AuthorizationStatus.NOT_DETERMINED:
            status = await self._authorizer.request_authorization()
            if status == AuthorizationStatus.AUTHORIZED:
                return
        raise UserTokenDenied()
