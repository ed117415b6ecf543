"""
Chat model. One conversation between exactly two users, keyed by the
canonical chat id (sorted participant uids joined by "_").
"""
from sqlalchemy import Column, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from thriftfinder.core.database import Base


class Chat(Base):
    __tablename__ = "chats"

    chat_id = Column(String, primary_key=True)
    participants = Column(JSON, nullable=False)  # [uid, uid], sorted
    item_id = Column(String, nullable=True)
    store_id = Column(String, nullable=True)
    last_message = Column(Text, nullable=True)  # summary only, never used for ordering
    last_timestamp = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    messages = relationship("Message", back_populates="chat", cascade="all, delete-orphan")
