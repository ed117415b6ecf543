"""
Reservation model. Pending -> Confirmed -> Completed, Cancelled from Pending/Confirmed.
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
import uuid
from thriftfinder.core.database import Base

RESERVATION_PENDING = "Pending"
RESERVATION_CONFIRMED = "Confirmed"
RESERVATION_COMPLETED = "Completed"
RESERVATION_CANCELLED = "Cancelled"
RESERVATION_STATUSES = (
    RESERVATION_PENDING,
    RESERVATION_CONFIRMED,
    RESERVATION_COMPLETED,
    RESERVATION_CANCELLED,
)

# Allowed transitions; Completed and Cancelled are terminal
RESERVATION_TRANSITIONS = {
    RESERVATION_PENDING: {RESERVATION_CONFIRMED, RESERVATION_CANCELLED},
    RESERVATION_CONFIRMED: {RESERVATION_COMPLETED, RESERVATION_CANCELLED},
    RESERVATION_COMPLETED: set(),
    RESERVATION_CANCELLED: set(),
}


class Reservation(Base):
    __tablename__ = "reservations"

    reservation_id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    item_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    store_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=RESERVATION_PENDING)
    reserved_at = Column(DateTime(timezone=True), server_default=func.now())
    sold_at = Column(DateTime(timezone=True), nullable=True)
