"""
Reservations API: customer reserve, listing and store-owner status updates.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from thriftfinder.core.database import get_db
from thriftfinder.core.dependencies import validate_session
from thriftfinder.schema.reservation import (
    ReservationResponse,
    ReservationStatusBody,
    ReserveBody,
    ReserveResponse,
)
from thriftfinder.service.reservation_service import ReservationService

router = APIRouter()


@router.put("/reserve/{item_id}", response_model=ReserveResponse)
async def reserve_item(
    item_id: str,
    body: ReserveBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Reserve an available item and open the chat with the store owner."""
    return ReservationService(db).reserve(
        uid=current_user["uid"], item_id=item_id, store_id=body.store_id
    )


@router.get("/reservations", response_model=List[ReservationResponse])
async def list_reservations(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Own reservations for customers, store reservations for owners."""
    return ReservationService(db).list_for_user(uid=current_user["uid"])


@router.put("/reservations/{reservation_id}", response_model=ReservationResponse)
async def update_reservation_status(
    reservation_id: str,
    body: ReservationStatusBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Store owner moves a reservation through Pending/Confirmed/Completed/Cancelled."""
    return ReservationService(db).update_status(
        uid=current_user["uid"], reservation_id=reservation_id, status=body.status
    )
