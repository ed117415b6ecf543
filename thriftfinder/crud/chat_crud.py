"""
Chat CRUD.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session

from thriftfinder.utils.chat_ids import derive_chat_id, split_chat_id
from thriftfinder.model.chat import Chat
from thriftfinder.crud.base import CRUDBase


class CRUDChat(CRUDBase[Chat, dict, dict]):

    def get_or_create(
        self,
        db: Session,
        *,
        user_a: str,
        user_b: str,
        item_id: Optional[str] = None,
        store_id: Optional[str] = None,
    ) -> Chat:
        """Get the canonical chat for two users, creating it lazily. Does not commit."""
        chat_id = derive_chat_id(user_a, user_b)
        chat = self.get(db, chat_id)
        if chat is None:
            chat = self.create_from_dict(
                db,
                obj_in={
                    "chat_id": chat_id,
                    "participants": list(split_chat_id(chat_id)),
                    "item_id": item_id,
                    "store_id": store_id,
                },
                commit=False,
            )
            return chat
        # Latest linked item/store wins
        if item_id:
            chat.item_id = item_id
        if store_id:
            chat.store_id = store_id
        return chat

    def touch(self, db: Session, *, chat: Chat, last_message: str, last_timestamp: datetime) -> None:
        """Update the denormalized summary fields. Does not commit."""
        chat.last_message = last_message
        chat.last_timestamp = last_timestamp
        db.add(chat)

    def list_for_user(self, db: Session, *, uid: str) -> List[Chat]:
        """Chats the user participates in, newest activity first."""
        # participants is JSON, so narrow on the canonical id and check membership below
        rows = (
            db.query(self.model)
            .filter(self.model.chat_id.contains(uid))
            .order_by(desc(self.model.last_timestamp))
            .all()
        )
        return [c for c in rows if uid in (c.participants or [])]


chat_crud = CRUDChat(Chat)
