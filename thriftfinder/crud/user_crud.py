"""
User CRUD operations.
"""
from typing import Optional
from sqlalchemy.orm import Session
from thriftfinder.model.user import User
from thriftfinder.crud.base import CRUDBase


class CRUDUser(CRUDBase[User, dict, dict]):
    """User-specific CRUD operations."""

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return self.get_by_field(db, "email", email)

    def get_role(self, db: Session, uid: str) -> Optional[str]:
        user = self.get(db, uid)
        return user.role if user else None


user_crud = CRUDUser(User)
