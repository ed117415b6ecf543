"""
Identity Resolver: the signed-in user and a fresh bearer token per call.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional

from thriftfinder.client.errors import ApiError, AuthenticationRequired

if TYPE_CHECKING:
    from thriftfinder.client.api import ApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


TokenProvider = Callable[[], Awaitable[Optional[str]]]
IdentityListener = Callable[[Optional[CurrentUser]], None]


class IdentityResolver:
    """
    Holds the current user and supplies a bearer token to downstream calls.

    Identity is passed explicitly to every component. Components that need to
    react to sign-in/sign-out register with on_change().
    """

    def __init__(
        self,
        user: Optional[CurrentUser] = None,
        token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
    ):
        self._user = user
        self._token = token
        self._token_provider = token_provider
        self._listeners: List[IdentityListener] = []

    @property
    def user(self) -> Optional[CurrentUser]:
        return self._user

    def require_user(self) -> CurrentUser:
        if self._user is None:
            raise AuthenticationRequired()
        return self._user

    async def get_token(self) -> str:
        """Bearer token for the next request; fetched fresh when a provider is set."""
        self.require_user()
        token = await self._token_provider() if self._token_provider else self._token
        if not token:
            raise AuthenticationRequired("Session token unavailable")
        return token

    def sign_in(self, user: CurrentUser, token: Optional[str] = None) -> None:
        self._user = user
        if token is not None:
            self._token = token
        logger.info(f"Signed in as {user.uid}")
        self._notify()

    def sign_out(self) -> None:
        if self._user is None:
            return
        logger.info(f"Signed out {self._user.uid}")
        self._user = None
        self._token = None
        self._notify()

    def on_change(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener; the returned callable unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._user)
            except Exception:
                logger.exception("Identity listener failed")

    async def login(self, api: "ApiClient", email: str, password: str) -> CurrentUser:
        """Sign in through the backend and keep the returned bearer token."""
        data = await api.login(email, password)
        info = data.get("user") or {}
        if not info.get("uid") or not data.get("access_token"):
            raise ApiError("Login response is missing the user or token", body=data)
        user = CurrentUser(
            uid=info["uid"],
            email=info.get("email"),
            display_name=info.get("displayName"),
        )
        self.sign_in(user, token=data.get("access_token"))
        return user
