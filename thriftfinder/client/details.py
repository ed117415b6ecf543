"""
Chat Detail Loader: chat metadata, the other participant's name, and the
linked item and store for the side drawer.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from thriftfinder.client.api import ApiClient
from thriftfinder.client.errors import ApiError
from thriftfinder.client.formatting import format_price, group_hours
from thriftfinder.client.identity import IdentityResolver
from thriftfinder.utils.chat_ids import other_participant

logger = logging.getLogger(__name__)

CHAT_NOT_FOUND = "Chat not found"
NO_LINKED_ITEM = "No linked item available"
UNKNOWN_USER = "Unknown"


@dataclass
class ChatDetails:
    chat_id: Optional[str] = None
    loading: bool = False
    chat: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    other_user_id: Optional[str] = None
    other_user_name: Optional[str] = None
    other_user_error: Optional[str] = None
    item: Optional[Dict[str, Any]] = None
    item_error: Optional[str] = None
    store: Optional[Dict[str, Any]] = None
    store_error: Optional[str] = None

    @property
    def not_found(self) -> bool:
        return self.error == CHAT_NOT_FOUND

    @property
    def item_price(self) -> str:
        return format_price((self.item or {}).get("price"))

    @property
    def store_hours(self) -> List[Dict[str, str]]:
        return group_hours((self.store or {}).get("hours"))


def display_name(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return UNKNOWN_USER
    return user.get("displayName") or user.get("email") or UNKNOWN_USER


class ChatDetailLoader:
    """
    One-shot loader, run once per chat id.

    Each load() bumps a generation counter; a response that arrives after a
    newer load() started is discarded so stale details never reach the view.
    """

    def __init__(self, api: ApiClient, identity: IdentityResolver):
        self.api = api
        self.identity = identity
        self.state = ChatDetails()
        self._generation = 0

    def cancel(self) -> None:
        """Drop any in-flight load."""
        self._generation += 1

    async def load(self, chat_id: str) -> ChatDetails:
        uid = self.identity.require_user().uid
        self._generation += 1
        generation = self._generation
        state = ChatDetails(chat_id=chat_id, loading=True)
        self.state = state

        try:
            chat = await self.api.get_chat(chat_id)
        except ApiError as e:
            logger.error(f"Failed to load chat {chat_id}: {e}")
            if generation == self._generation:
                state.loading = False
                state.error = f"Failed to load chat: {e.reason}"
            return state
        if generation != self._generation:
            return state
        if chat is None:
            state.loading = False
            state.error = CHAT_NOT_FOUND
            return state

        state.chat = chat
        try:
            state.other_user_id = other_participant(chat_id, uid)
        except ValueError:
            logger.warning(f"Chat id {chat_id} does not include {uid}")

        name, item, store = await asyncio.gather(
            self._other_user(state.other_user_id),
            self._item(chat.get("itemId"), chat.get("storeId")),
            self._store(chat.get("storeId")),
        )
        if generation != self._generation:
            return state

        state.other_user_name, state.other_user_error = name
        state.item, state.item_error = item
        state.store, state.store_error = store
        state.loading = False
        return state

    async def _other_user(self, other_id: Optional[str]) -> Tuple[str, Optional[str]]:
        if not other_id:
            return UNKNOWN_USER, None
        try:
            return display_name(await self.api.get_user(other_id)), None
        except ApiError as e:
            logger.error(f"Failed to fetch user {other_id}: {e}")
            return UNKNOWN_USER, f"Failed to fetch user: {e.reason}"

    async def _item(
        self, item_id: Optional[str], store_id: Optional[str]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        if not item_id:
            return None, NO_LINKED_ITEM
        try:
            return await self.api.get_item(item_id), None
        except ApiError as e:
            if not e.not_found:
                logger.error(f"Failed to fetch item {item_id}: {e}")
                return None, f"Failed to fetch item: {e.reason}"
        if store_id:
            item = await self._item_from_store(item_id, store_id)
            if item:
                return item, None
        return None, NO_LINKED_ITEM

    async def _item_from_store(self, item_id: str, store_id: str) -> Optional[Dict[str, Any]]:
        try:
            items: List[Dict[str, Any]] = await self.api.get_store_items(store_id)
        except ApiError as e:
            logger.warning(f"Store item fallback failed for {store_id}: {e}")
            return None
        return next((i for i in items if i.get("itemId") == item_id), None)

    async def _store(self, store_id: Optional[str]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        if not store_id:
            return None, None
        try:
            return await self.api.get_store(store_id), None
        except ApiError as e:
            logger.error(f"Failed to fetch store {store_id}: {e}")
            return None, f"Store not found: {e.reason}"
