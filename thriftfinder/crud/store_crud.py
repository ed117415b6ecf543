"""
Store CRUD operations.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from thriftfinder.model.store import Store
from thriftfinder.crud.base import CRUDBase


class CRUDStore(CRUDBase[Store, dict, dict]):

    def get_by_owner(self, db: Session, *, owner_id: str) -> Optional[Store]:
        return db.query(self.model).filter(self.model.owner_id == owner_id).first()

    def list_stores(self, db: Session) -> List[Store]:
        return db.query(self.model).order_by(self.model.store_name).all()


store_crud = CRUDStore(Store)
