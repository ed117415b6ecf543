"""
Reservation schemas.
"""
from datetime import datetime
from typing import Optional

from thriftfinder.schema.base import CamelModel


class ReserveBody(CamelModel):
    store_id: Optional[str] = None


class ReserveResponse(CamelModel):
    reservation_id: str
    message_id: str
    chat_id: str


class ReservationStatusBody(CamelModel):
    status: Optional[str] = None


class ReservationResponse(CamelModel):
    reservation_id: str
    item_id: str
    user_id: str
    store_id: str
    status: str
    reserved_at: Optional[datetime] = None
    sold_at: Optional[datetime] = None
