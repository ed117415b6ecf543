"""
Store service: store owners open a store and list items in it.
"""
from typing import Any, Dict
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from thriftfinder.core.exceptions import BadRequest, Forbidden, NotFound, ServiceError
from thriftfinder.crud import item_crud, store_crud, user_crud
from thriftfinder.model.item import ITEM_AVAILABLE, Item
from thriftfinder.model.store import Store

logger = logging.getLogger(__name__)

STORE_OWNER = "storeOwner"


class StoreService:

    def __init__(self, db: Session):
        self.db = db

    def _require_owner(self, uid: str) -> None:
        user = user_crud.get(self.db, uid)
        if not user:
            raise NotFound("User")
        if user.role != STORE_OWNER:
            raise Forbidden(message="User is not a store owner")

    def create_store(self, *, uid: str, data: Dict[str, Any]) -> Store:
        """Open the caller's store. An owner has at most one store."""
        self._require_owner(uid)
        if store_crud.get_by_owner(self.db, owner_id=uid):
            raise BadRequest(message="Store already exists for this owner", code="STORE_EXISTS")
        try:
            store = store_crud.create_from_dict(self.db, obj_in={**data, "owner_id": uid})
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to create store for {uid}: {e}")
            raise ServiceError(message="Failed to create store. Please try again.")
        logger.info(f"Store {store.store_id} created by {uid}")
        return store

    def create_item(self, *, uid: str, store_id: str, data: Dict[str, Any]) -> Item:
        """List a new Available item in a store the caller owns."""
        store = store_crud.get(self.db, store_id)
        if not store:
            raise NotFound("Store")
        if store.owner_id != uid:
            raise Forbidden(message="Unauthorized to add items to this store")
        try:
            item = item_crud.create_from_dict(
                self.db,
                obj_in={**data, "store_id": store_id, "status": ITEM_AVAILABLE},
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to create item in {store_id}: {e}")
            raise ServiceError(message="Failed to create item. Please try again.")
        logger.info(f"Item {item.item_id} listed in store {store_id}")
        return item
