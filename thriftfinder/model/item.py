"""
Item model. Catalog entry listed by a store.
"""
from sqlalchemy import Column, String, Numeric, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
from thriftfinder.core.database import Base

ITEM_AVAILABLE = "Available"
ITEM_RESERVED = "Reserved"
ITEM_SOLD = "Sold"


class Item(Base):
    __tablename__ = "items"

    item_id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    store_id = Column(String, ForeignKey("stores.store_id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    size = Column(String, nullable=True)
    style = Column(String, nullable=True)
    images = Column(JSON, nullable=False, default=list)  # [{"imageURL": ...}]
    status = Column(String, nullable=False, default=ITEM_AVAILABLE)  # Available, Reserved, Sold, Out of Stock
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    store = relationship("Store", back_populates="items")
