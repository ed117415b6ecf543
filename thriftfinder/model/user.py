"""
User model. uid is the identity provider subject.
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from thriftfinder.core.database import Base

SIGNUP_ROLES = ("customer", "storeOwner")


class User(Base):
    __tablename__ = "users"

    uid = Column(String, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default="customer")  # customer, storeOwner, admin
    cognito_username = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
