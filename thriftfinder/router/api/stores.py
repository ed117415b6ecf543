"""
Stores API: stores, their items, item search, and public user lookups.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from thriftfinder.core.database import get_db
from thriftfinder.core.dependencies import validate_session
from thriftfinder.core.exceptions import NotFound
from thriftfinder.crud import item_crud, store_crud, user_crud
from thriftfinder.model.item import ITEM_AVAILABLE
from thriftfinder.schema.store import (
    ItemCreate,
    ItemResponse,
    StoreCreate,
    StoreResponse,
    UserPublic,
)
from thriftfinder.service.store_service import StoreService

router = APIRouter()


@router.get("", response_model=List[StoreResponse])
async def list_stores(db: Session = Depends(get_db)):
    """All stores (public catalog)."""
    return store_crud.list_stores(db)


@router.post("", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
async def create_store(
    body: StoreCreate,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Open a store owned by the current store owner."""
    return StoreService(db).create_store(
        uid=current_user["uid"],
        data=body.model_dump(exclude_none=True),
    )


@router.get("/users/{uid}", response_model=UserPublic)
async def get_user(
    uid: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Display name and email of another user."""
    user = user_crud.get(db, uid)
    if not user:
        raise NotFound("User")
    return user


@router.get("/items/search", response_model=List[ItemResponse])
async def search_items(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    category: Optional[str] = None,
    style: Optional[str] = None,
    size: Optional[str] = None,
    item_status: Optional[str] = Query(ITEM_AVAILABLE, alias="status"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Items across all stores; only Available ones unless status is given."""
    return item_crud.search(
        db,
        term=search_term,
        category=category,
        style=style,
        size=size,
        status=item_status,
        min_price=min_price,
        max_price=max_price,
    )


@router.get("/items/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    item = item_crud.get(db, item_id)
    if not item:
        raise NotFound("Item")
    return item


@router.get("/{store_id}", response_model=StoreResponse)
async def get_store(
    store_id: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    store = store_crud.get(db, store_id)
    if not store:
        raise NotFound("Store")
    return store


@router.get("/{store_id}/items", response_model=List[ItemResponse])
async def list_store_items(
    store_id: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Items listed by one store."""
    if not store_crud.get(db, store_id):
        raise NotFound("Store")
    return item_crud.list_by_store(db, store_id=store_id)


@router.post("/{store_id}/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    store_id: str,
    body: ItemCreate,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """List a new item; only the store's owner may do this."""
    return StoreService(db).create_item(
        uid=current_user["uid"],
        store_id=store_id,
        data=body.model_dump(exclude_none=True),
    )
