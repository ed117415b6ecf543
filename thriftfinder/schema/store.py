"""
Store, item and public user schemas.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import Field

from thriftfinder.schema.base import CamelModel


class StoreResponse(CamelModel):
    store_id: str
    store_name: str
    address: Optional[str] = None
    owner_id: Optional[str] = None
    profile_image_url: Optional[str] = Field(default=None, alias="profileImageURL")
    hours: Optional[Dict[str, Any]] = None
    location: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class ItemResponse(CamelModel):
    item_id: str
    store_id: str
    name: str
    price: Optional[Decimal] = None
    description: Optional[str] = None
    category: Optional[str] = None
    size: Optional[str] = None
    style: Optional[str] = None
    images: List[Dict[str, Any]] = []
    status: str
    created_at: Optional[datetime] = None


class UserPublic(CamelModel):
    """What one user may see about another (chat header lookup)."""
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class StoreCreate(CamelModel):
    store_name: str = Field(min_length=1)
    address: Optional[str] = None
    profile_image_url: Optional[str] = Field(default=None, alias="profileImageURL")
    hours: Optional[Dict[str, Any]] = None
    location: Optional[Dict[str, Any]] = None


class ItemCreate(CamelModel):
    name: str = Field(min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    size: Optional[str] = None
    style: Optional[str] = None
    images: List[Dict[str, Any]] = []
