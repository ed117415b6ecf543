"""
Chat schemas: chats, messages, read receipts.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from thriftfinder.schema.base import CamelModel


class MessageCreateBody(CamelModel):
    """Body for POST /api/stores/messages. Emptiness is checked by the route."""
    receiver_id: Optional[str] = None
    message: Optional[str] = None
    item_id: Optional[str] = None
    store_id: Optional[str] = None


class MessageResponse(CamelModel):
    """Single message, also the element type of a snapshot."""
    message_id: str
    chat_id: str
    sender_id: str
    receiver_id: str
    message: str
    timestamp: datetime
    read: bool = False
    item_id: Optional[str] = None
    store_id: Optional[str] = None


class SendMessageResponse(CamelModel):
    message_id: str
    chat_id: str
    sender_id: str
    receiver_id: str
    message: str
    timestamp: datetime


class ChatResponse(CamelModel):
    """Chat metadata for the one-shot detail read."""
    chat_id: str
    participants: List[str]
    item_id: Optional[str] = None
    store_id: Optional[str] = None
    last_message: Optional[str] = None
    last_timestamp: Optional[datetime] = None


class ChatListItem(ChatResponse):
    """Chat in the inbox list, with the other participant resolved."""
    other_id: str
    other_name: str = Field(..., description="Display name, email or 'Unknown'.")


class MarkReadResponse(CamelModel):
    message: str = "Messages marked as read"
    updated: int = 0
