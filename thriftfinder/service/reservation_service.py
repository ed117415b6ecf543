"""
Reservation service: customer reserve and store-owner status workflow.
"""
from datetime import datetime, timezone
from typing import Dict, List
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from thriftfinder.core.exceptions import BadRequest, Forbidden, NotFound, ServiceError
from thriftfinder.crud import item_crud, reservation_crud, store_crud, user_crud
from thriftfinder.model.item import ITEM_AVAILABLE, ITEM_RESERVED, ITEM_SOLD
from thriftfinder.model.reservation import (
    RESERVATION_CANCELLED,
    RESERVATION_COMPLETED,
    RESERVATION_PENDING,
    RESERVATION_STATUSES,
    RESERVATION_TRANSITIONS,
    Reservation,
)
from thriftfinder.service.chat_service import ChatService

logger = logging.getLogger(__name__)

RESERVATION_MESSAGE = "Hi, I have reserved the item {name}. When can I pick it up?"


class ReservationService:

    def __init__(self, db: Session):
        self.db = db

    def reserve(self, *, uid: str, item_id: str, store_id: str) -> Dict[str, str]:
        """
        Reserve an available item for the customer.

        Marks the item Reserved, creates a Pending reservation and messages the
        store owner in their canonical chat, all in one transaction.
        """
        item = item_crud.get(self.db, item_id)
        if not item:
            raise NotFound("Item")
        if not store_id or item.store_id != store_id:
            raise BadRequest(message="Invalid store", code="INVALID_STORE")
        if item.status != ITEM_AVAILABLE:
            raise BadRequest(message="Item not available", code="ITEM_NOT_AVAILABLE")
        store = store_crud.get(self.db, store_id)
        if not store or not store.owner_id:
            raise NotFound("Store")
        if store.owner_id == uid:
            raise BadRequest(message="Cannot reserve your own item", code="OWN_ITEM")

        chat_service = ChatService(self.db)
        try:
            item.status = ITEM_RESERVED
            self.db.add(item)
            reservation = reservation_crud.create_from_dict(
                self.db,
                obj_in={
                    "item_id": item_id,
                    "user_id": uid,
                    "store_id": store_id,
                    "status": RESERVATION_PENDING,
                    "reserved_at": datetime.now(timezone.utc),
                },
                commit=False,
            )
            msg, chat = chat_service.send_message(
                sender_id=uid,
                receiver_id=store.owner_id,
                text=RESERVATION_MESSAGE.format(name=item.name),
                item_id=item_id,
                store_id=store_id,
                commit=False,
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to reserve item {item_id}: {e}")
            raise ServiceError(message="Failed to reserve item. Please try again.")

        logger.info(f"Item {item_id} reserved by {uid} (reservation {reservation.reservation_id})")
        chat_service.publish_snapshot(chat.chat_id)
        return {
            "reservation_id": reservation.reservation_id,
            "message_id": msg.message_id,
            "chat_id": chat.chat_id,
        }

    def list_for_user(self, *, uid: str) -> List[Reservation]:
        """Customers see their own reservations; store owners see their store's."""
        user = user_crud.get(self.db, uid)
        if not user:
            raise NotFound("User")
        if user.role == "storeOwner":
            store = store_crud.get_by_owner(self.db, owner_id=uid)
            if not store:
                return []
            return reservation_crud.list_by_store(self.db, store_id=store.store_id)
        return reservation_crud.list_by_user(self.db, user_id=uid)

    def update_status(self, *, uid: str, reservation_id: str, status: str) -> Reservation:
        """Store-owner status change with item side effects."""
        if status not in RESERVATION_STATUSES:
            raise BadRequest(message="Invalid status", code="INVALID_STATUS")
        store = store_crud.get_by_owner(self.db, owner_id=uid)
        if not store:
            raise Forbidden(message="User is not a store owner")
        reservation = reservation_crud.get(self.db, reservation_id)
        if not reservation:
            raise NotFound("Reservation")
        if reservation.store_id != store.store_id:
            raise Forbidden(message="Unauthorized to update this reservation")
        if status == reservation.status:
            return reservation
        if status not in RESERVATION_TRANSITIONS.get(reservation.status, set()):
            raise BadRequest(
                message=f"Cannot change reservation from {reservation.status} to {status}",
                code="INVALID_TRANSITION",
            )

        item = item_crud.get(self.db, reservation.item_id)
        if status in (RESERVATION_COMPLETED, RESERVATION_CANCELLED) and not item:
            raise NotFound("Item")

        try:
            reservation.status = status
            if status == RESERVATION_COMPLETED:
                reservation.sold_at = datetime.now(timezone.utc)
                item.status = ITEM_SOLD
                self.db.add(item)
            elif status == RESERVATION_CANCELLED:
                item.status = ITEM_AVAILABLE
                self.db.add(item)
            self.db.add(reservation)
            self.db.commit()
            self.db.refresh(reservation)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to update reservation {reservation_id}: {e}")
            raise ServiceError()

        logger.info(f"Reservation {reservation_id} -> {status}")
        return reservation
