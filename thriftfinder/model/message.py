"""
Message model. Created once, only the read flag is ever updated.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import uuid
from thriftfinder.core.database import Base


class Message(Base):
    __tablename__ = "messages"

    message_id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    chat_id = Column(String, ForeignKey("chats.chat_id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(String, nullable=False, index=True)
    receiver_id = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    read = Column(Boolean, nullable=False, default=False)
    item_id = Column(String, nullable=True)
    store_id = Column(String, nullable=True)

    chat = relationship("Chat", back_populates="messages")
