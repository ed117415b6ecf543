"""
Message CRUD.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session

from thriftfinder.model.message import Message
from thriftfinder.crud.base import CRUDBase


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CRUDMessage(CRUDBase[Message, Dict[str, Any], Dict[str, Any]]):

    def latest_in_chat(self, db: Session, *, chat_id: str) -> Optional[Message]:
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id)
            .order_by(desc(self.model.timestamp))
            .first()
        )

    def next_timestamp(self, db: Session, *, chat_id: str) -> datetime:
        """Now, bumped past the chat's latest message so timestamps strictly increase."""
        now = datetime.now(timezone.utc)
        latest = self.latest_in_chat(db, chat_id=chat_id)
        if latest is not None and latest.timestamp is not None:
            last = _aware(latest.timestamp)
            if now <= last:
                now = last + timedelta(microseconds=1)
        return now

    def list_by_chat(self, db: Session, *, chat_id: str) -> List[Message]:
        """All messages in a chat, oldest first."""
        return (
            db.query(self.model)
            .filter(self.model.chat_id == chat_id)
            .order_by(self.model.timestamp)
            .all()
        )

    def mark_read_for_receiver(self, db: Session, *, chat_id: str, receiver_id: str) -> int:
        """Flip read on every unread message addressed to receiver_id. Returns count."""
        unread = (
            db.query(self.model)
            .filter(
                self.model.chat_id == chat_id,
                self.model.receiver_id == receiver_id,
                self.model.read.is_(False),
            )
            .all()
        )
        for msg in unread:
            msg.read = True
            db.add(msg)
        if unread:
            db.commit()
        return len(unread)


message_crud = CRUDMessage(Message)
