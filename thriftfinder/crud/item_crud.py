"""
Item CRUD operations.
"""
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from thriftfinder.model.item import Item
from thriftfinder.crud.base import CRUDBase


class CRUDItem(CRUDBase[Item, dict, dict]):

    def list_by_store(self, db: Session, *, store_id: str) -> List[Item]:
        return (
            db.query(self.model)
            .filter(self.model.store_id == store_id)
            .order_by(self.model.created_at)
            .all()
        )

    def search(
        self,
        db: Session,
        *,
        term: Optional[str] = None,
        category: Optional[str] = None,
        style: Optional[str] = None,
        size: Optional[str] = None,
        status: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Item]:
        """Items matching every given filter; term matches name or description, case-insensitively."""
        query = db.query(self.model)
        for column, value in (
            (self.model.category, category),
            (self.model.style, style),
            (self.model.size, size),
            (self.model.status, status),
        ):
            if value:
                query = query.filter(column == value)
        if term:
            pattern = f"%{term.strip().lower()}%"
            query = query.filter(or_(
                self.model.name.ilike(pattern),
                self.model.description.ilike(pattern),
            ))
        if min_price is not None:
            query = query.filter(self.model.price >= min_price)
        if max_price is not None:
            query = query.filter(self.model.price <= max_price)
        return query.order_by(self.model.name).all()


item_crud = CRUDItem(Item)
