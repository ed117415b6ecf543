"""
Store model. owner_id is the user who receives reservation and enquiry messages.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
from thriftfinder.core.database import Base


class Store(Base):
    __tablename__ = "stores"

    store_id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    store_name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    owner_id = Column(String, ForeignKey("users.uid", ondelete="SET NULL"), nullable=True, index=True)
    profile_image_url = Column(String, nullable=True)
    hours = Column(JSON, nullable=True)  # {"Monday": {"open": true, "start": "09:00", "end": "17:00"}, ...}
    location = Column(JSON, nullable=True)  # {"lat": ..., "lng": ...}
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", backref="stores")
    items = relationship("Item", back_populates="store", cascade="all, delete-orphan")
