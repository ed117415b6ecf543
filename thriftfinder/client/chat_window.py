"""
Chat window: wires identity, role, feed, detail loader and composer for one chat.
"""
import asyncio
import logging
from typing import Callable, List, Optional

from thriftfinder.client.api import ApiClient
from thriftfinder.client.composer import MessageComposer
from thriftfinder.client.details import ChatDetailLoader
from thriftfinder.client.feed import MessageFeed, SnapshotSource, WebSocketSnapshotSource
from thriftfinder.client.identity import CurrentUser, IdentityResolver
from thriftfinder.client.roles import RoleResolver, suggestions_for

logger = logging.getLogger(__name__)


class ChatWindow:

    def __init__(
        self,
        api: ApiClient,
        identity: IdentityResolver,
        source: Optional[SnapshotSource] = None,
        roles: Optional[RoleResolver] = None,
    ):
        self.api = api
        self.identity = identity
        self.roles = roles or RoleResolver(api)
        self.feed = MessageFeed(api, identity, source or WebSocketSnapshotSource(identity))
        self.loader = ChatDetailLoader(api, identity)
        self.composer = MessageComposer(api, identity)
        self.chat_id: Optional[str] = None
        self.role: Optional[str] = None
        self._unlisten: Optional[Callable[[], None]] = None

    async def open(self, chat_id: str) -> None:
        """Requires a signed-in user; raises AuthenticationRequired otherwise."""
        user = self.identity.require_user()
        if self._unlisten is None:
            self._unlisten = self.identity.on_change(self._on_identity_change)
        self.chat_id = chat_id
        self.role = await self.roles.resolve(user.uid)
        self.composer.bind(chat_id)
        await self.feed.open(chat_id)
        details = await self.loader.load(chat_id)
        if details.chat_id == self.chat_id and details.chat is not None:
            self.composer.bind(chat_id, details.chat)

    async def switch(self, chat_id: str) -> None:
        if chat_id == self.chat_id:
            return
        await self.feed.close()
        self.loader.cancel()
        await self.open(chat_id)

    async def close(self) -> None:
        await self.feed.close()
        self.loader.cancel()
        if self._unlisten is not None:
            self._unlisten()
            self._unlisten = None
        self.chat_id = None

    def _on_identity_change(self, user: Optional[CurrentUser]) -> None:
        if user is None:
            logger.info(f"Signed out; closing chat {self.chat_id}")
            asyncio.get_running_loop().create_task(self.close())

    @property
    def suggestions(self) -> List[str]:
        return suggestions_for(self.role)

    @property
    def header(self) -> str:
        name = self.loader.state.other_user_name
        if self.loader.state.loading or name is None:
            return "Chat with Loading..."
        return f"Chat with {name}"

    @property
    def banners(self) -> List[str]:
        """Non-blocking error texts, one per failed section."""
        details = self.loader.state
        candidates = [
            self.roles.error,
            details.error,
            details.other_user_error,
            self.feed.state.error,
            self.feed.state.notice,
            self.composer.error,
        ]
        return [text for text in candidates if text]
