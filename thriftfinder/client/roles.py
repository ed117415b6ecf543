"""
Role Resolver: uid -> role, cached briefly, plus role-specific suggestion chips.
"""
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from thriftfinder.client.api import ApiClient
from thriftfinder.client.errors import ApiError
from thriftfinder.core.config import settings

logger = logging.getLogger(__name__)

CUSTOMER = "customer"
STORE_OWNER = "storeOwner"
ADMIN = "admin"

SHOPPER_SUGGESTIONS = (
    "Is this item available?",
    "What is the condition like?",
    "Can I reserve for pickup?",
)
OWNER_SUGGESTIONS = (
    "Yes, available for pickup.",
    "Condition is excellent.",
    "Reserved! See you soon.",
)


def suggestions_for(role: Optional[str]) -> List[str]:
    return list(OWNER_SUGGESTIONS if role == STORE_OWNER else SHOPPER_SUGGESTIONS)


class RoleResolver:
    """One getRole call per uid per TTL window. Failures fall back to customer."""

    def __init__(
        self,
        api: ApiClient,
        ttl: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self.ttl = settings.ROLE_CACHE_TTL if ttl is None else ttl
        self._clock = clock
        self._cache: Dict[str, Tuple[str, float]] = {}
        self.error: Optional[str] = None

    async def resolve(self, uid: str) -> str:
        cached = self._cache.get(uid)
        if cached and cached[1] > self._clock():
            return cached[0]
        try:
            role = await self.api.get_role(uid)
        except ApiError as e:
            logger.error(f"Failed to fetch role for {uid}: {e}")
            self.error = f"Failed to fetch role: {e.reason}"
            return CUSTOMER
        self.error = None
        self._cache[uid] = (role, self._clock() + self.ttl)
        return role

    def invalidate(self, uid: Optional[str] = None) -> None:
        if uid is None:
            self._cache.clear()
        else:
            self._cache.pop(uid, None)
