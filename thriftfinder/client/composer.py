"""
Message Composer: single-line buffer and send.
"""
import logging
from typing import Any, Dict, Optional

from thriftfinder.client.api import ApiClient
from thriftfinder.client.errors import ApiError
from thriftfinder.client.identity import IdentityResolver
from thriftfinder.utils.chat_ids import other_participant

logger = logging.getLogger(__name__)


class MessageComposer:

    def __init__(self, api: ApiClient, identity: IdentityResolver):
        self.api = api
        self.identity = identity
        self.text = ""
        self.error: Optional[str] = None
        self.sending = False
        self.chat_id: Optional[str] = None
        self.item_id: Optional[str] = None
        self.store_id: Optional[str] = None

    def bind(self, chat_id: str, chat: Optional[Dict[str, Any]] = None) -> None:
        """Target chat_id, carrying itemId/storeId from the loaded chat."""
        self.chat_id = chat_id
        self.item_id = (chat or {}).get("itemId")
        self.store_id = (chat or {}).get("storeId")
        self.error = None

    def set_text(self, text: str) -> None:
        self.text = text

    def apply_suggestion(self, suggestion: str) -> None:
        self.text = suggestion

    async def send(self) -> Optional[Dict[str, Any]]:
        """Post the buffer. Returns the created message, or None when nothing was sent."""
        text = self.text.strip()
        if not text or not self.chat_id:
            return None
        uid = self.identity.require_user().uid
        try:
            receiver_id = other_participant(self.chat_id, uid)
        except ValueError as e:
            self.error = f"Failed to send message: {e}"
            return None

        self.sending = True
        try:
            created = await self.api.send_message(
                receiver_id, text, item_id=self.item_id, store_id=self.store_id
            )
        except ApiError as e:
            logger.error(f"Failed to send message in {self.chat_id}: {e}")
            self.error = f"Failed to send message: {e.reason}"
            return None
        finally:
            self.sending = False

        self.text = ""
        self.error = None
        return created
