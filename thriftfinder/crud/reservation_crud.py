"""
Reservation CRUD.
"""
from typing import List
from sqlalchemy import desc
from sqlalchemy.orm import Session

from thriftfinder.model.reservation import Reservation
from thriftfinder.crud.base import CRUDBase


class CRUDReservation(CRUDBase[Reservation, dict, dict]):

    def list_by_user(self, db: Session, *, user_id: str) -> List[Reservation]:
        return (
            db.query(self.model)
            .filter(self.model.user_id == user_id)
            .order_by(desc(self.model.reserved_at))
            .all()
        )

    def list_by_store(self, db: Session, *, store_id: str) -> List[Reservation]:
        return (
            db.query(self.model)
            .filter(self.model.store_id == store_id)
            .order_by(desc(self.model.reserved_at))
            .all()
        )


reservation_crud = CRUDReservation(Reservation)
