"""
Chat service: sending messages, read receipts and snapshots.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from thriftfinder.chat.connection_manager import connection_manager
from thriftfinder.core.config import settings
from thriftfinder.core.exceptions import BadRequest, NotFound, ServiceError
from thriftfinder.crud import chat_crud, message_crud, user_crud
from thriftfinder.model.chat import Chat
from thriftfinder.model.message import Message
from thriftfinder.schema.chat import MessageResponse
from thriftfinder.utils.chat_ids import other_participant, split_chat_id

logger = logging.getLogger(__name__)

SNAPSHOT_EVENT = "snapshot"


def message_to_payload(msg: Message) -> Dict[str, Any]:
    """Serialize a message for responses and WebSocket snapshots."""
    return MessageResponse.model_validate(msg).model_dump(mode="json", by_alias=True)


class ChatService:
    """Message and chat operations for one request."""

    def __init__(self, db: Session):
        self.db = db

    def send_message(
        self,
        *,
        sender_id: str,
        receiver_id: Optional[str],
        text: Optional[str],
        item_id: Optional[str] = None,
        store_id: Optional[str] = None,
        commit: bool = True,
    ) -> Tuple[Message, Chat]:
        """
        Create a message in the canonical chat between sender and receiver.

        The chat is created on first contact and its lastMessage/lastTimestamp
        summary is updated in the same transaction as the message.
        """
        content = (text or "").strip()
        if not receiver_id or not content:
            raise BadRequest(message="Missing receiverId or message", code="MISSING_FIELDS")
        if receiver_id == sender_id:
            raise BadRequest(message="Cannot send a message to yourself", code="INVALID_RECEIVER")
        if len(content) > settings.MESSAGE_MAX_LENGTH:
            raise BadRequest(message="Message is too long", code="MESSAGE_TOO_LONG")

        try:
            chat = chat_crud.get_or_create(
                self.db,
                user_a=sender_id,
                user_b=receiver_id,
                item_id=item_id,
                store_id=store_id,
            )
            timestamp = message_crud.next_timestamp(self.db, chat_id=chat.chat_id)
            msg = message_crud.create_from_dict(
                self.db,
                obj_in={
                    "chat_id": chat.chat_id,
                    "sender_id": sender_id,
                    "receiver_id": receiver_id,
                    "message": content,
                    "timestamp": timestamp,
                    "read": False,
                    "item_id": item_id,
                    "store_id": store_id,
                },
                commit=False,
            )
            chat_crud.touch(self.db, chat=chat, last_message=content, last_timestamp=timestamp)
            if commit:
                self.db.commit()
                self.db.refresh(msg)
                self.db.refresh(chat)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to save message: {e}")
            raise ServiceError(message="Failed to save message. Please try again.")

        logger.info(f"Message {msg.message_id} sent in chat {chat.chat_id}")
        if commit:
            self.publish_snapshot(chat.chat_id)
        return msg, chat

    def get_chat_for_user(self, *, chat_id: str, uid: str) -> Chat:
        """Chat metadata, only visible to its participants."""
        chat = chat_crud.get(self.db, chat_id)
        if not chat or uid not in (chat.participants or []):
            raise NotFound("Chat")
        return chat

    def list_chats(self, *, uid: str) -> List[Dict[str, Any]]:
        """Inbox rows with the other participant resolved."""
        rows = []
        for chat in chat_crud.list_for_user(self.db, uid=uid):
            other_id = other_participant(chat.chat_id, uid)
            other = user_crud.get(self.db, other_id)
            other_name = "Unknown"
            if other:
                other_name = other.display_name or other.email or "Unknown"
            rows.append({
                "chat_id": chat.chat_id,
                "participants": chat.participants,
                "item_id": chat.item_id,
                "store_id": chat.store_id,
                "last_message": chat.last_message,
                "last_timestamp": chat.last_timestamp,
                "other_id": other_id,
                "other_name": other_name,
            })
        return rows

    def snapshot(self, chat_id: str) -> List[Dict[str, Any]]:
        """Full ordered message list for a chat."""
        return [message_to_payload(m) for m in message_crud.list_by_chat(self.db, chat_id=chat_id)]

    def mark_read(self, *, chat_id: str, uid: str) -> int:
        """Mark all unread messages addressed to uid as read."""
        try:
            if uid not in split_chat_id(chat_id):
                raise NotFound("Chat")
        except ValueError:
            raise NotFound("Chat")
        try:
            updated = message_crud.mark_read_for_receiver(self.db, chat_id=chat_id, receiver_id=uid)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to mark messages read: {e}")
            raise ServiceError()
        if updated:
            logger.info(f"Marked {updated} messages read in chat {chat_id}")
            self.publish_snapshot(chat_id)
        return updated

    def publish_snapshot(self, chat_id: str) -> None:
        connection_manager.broadcast_to_chat_sync(chat_id, SNAPSHOT_EVENT, self.snapshot(chat_id))
