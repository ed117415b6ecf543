"""
Reservations view: the reservation list of the signed-in user.

Customers see their own reservations; store owners see their store's and
move them through Pending -> Confirmed -> Completed (or Cancelled). A
Completed reservation is a sale and never goes back to active.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from thriftfinder.client.api import ApiClient
from thriftfinder.client.errors import ApiError
from thriftfinder.client.identity import IdentityResolver

logger = logging.getLogger(__name__)

PENDING = "Pending"
CONFIRMED = "Confirmed"
CANCELLED = "Cancelled"
COMPLETED = "Completed"
STATUSES = (PENDING, CONFIRMED, CANCELLED, COMPLETED)

ACTIVE_VIEW = "active"
SALES_VIEW = "sales"

UNKNOWN_ITEM = "Unknown Item"
UNKNOWN_USER = "Unknown User"
UNCATEGORIZED = "Uncategorized"
COMPLETED_LOCKED = "Cannot change status of completed reservation back to active."
STATUS_UPDATED = "Status updated successfully!"


@dataclass
class ReservationFilters:
    view_mode: str = ACTIVE_VIEW
    status: Optional[str] = None
    category: Optional[str] = None
    search: str = ""


class ReservationsView:

    def __init__(self, api: ApiClient, identity: IdentityResolver):
        self.api = api
        self.identity = identity
        self.reservations: List[Dict[str, Any]] = []
        self.items: Dict[str, Dict[str, Any]] = {}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.loading = False
        self.error: Optional[str] = None
        self.message: Optional[str] = None

    async def load(self) -> None:
        """Fetch reservations, then the item and customer behind each one."""
        self.identity.require_user()
        self.loading = True
        self.error = None
        try:
            self.reservations = await self.api.get_reservations()
            item_ids = sorted({r.get("itemId") for r in self.reservations if r.get("itemId")})
            user_ids = sorted({r.get("userId") for r in self.reservations if r.get("userId")})
            items, users = await asyncio.gather(
                asyncio.gather(*(self._item(i) for i in item_ids)),
                asyncio.gather(*(self._user(u) for u in user_ids)),
            )
            self.items = dict(zip(item_ids, items))
            self.users = dict(zip(user_ids, users))
        except ApiError as e:
            logger.error(f"Failed to load reservations: {e}")
            self.error = f"Failed to load reservations: {e.reason}"
        finally:
            self.loading = False

    async def _item(self, item_id: str) -> Dict[str, Any]:
        try:
            return await self.api.get_item(item_id)
        except ApiError as e:
            logger.warning(f"Item {item_id} unavailable for reservation list: {e}")
            return {"itemId": item_id, "name": UNKNOWN_ITEM}

    async def _user(self, uid: str) -> Dict[str, Any]:
        try:
            return await self.api.get_user(uid)
        except ApiError as e:
            logger.warning(f"User {uid} unavailable for reservation list: {e}")
            return {"uid": uid, "displayName": UNKNOWN_USER}

    def find(self, reservation_id: str) -> Optional[Dict[str, Any]]:
        return next((r for r in self.reservations if r.get("reservationId") == reservation_id), None)

    @property
    def categories(self) -> List[str]:
        return sorted({i.get("category") or UNCATEGORIZED for i in self.items.values()})

    def visible(self, filters: Optional[ReservationFilters] = None) -> List[Dict[str, Any]]:
        """Active reservations or completed sales, narrowed by status, category and search text."""
        f = filters or ReservationFilters()
        term = f.search.strip().lower()
        rows = []
        for res in self.reservations:
            completed = res.get("status") == COMPLETED
            if (f.view_mode == SALES_VIEW) != completed:
                continue
            if f.status and res.get("status") != f.status:
                continue
            item = self.items.get(res.get("itemId")) or {}
            if f.category and (item.get("category") or UNCATEGORIZED) != f.category:
                continue
            if term:
                user = self.users.get(res.get("userId")) or {}
                names = ((item.get("name") or "").lower(), (user.get("displayName") or "").lower())
                if not any(term in n for n in names):
                    continue
            rows.append(res)
        return rows

    async def update_status(self, reservation_id: str, status: str) -> bool:
        """Change a reservation's status. Completed reservations are refused without a request."""
        self.identity.require_user()
        self.message = None
        reservation = self.find(reservation_id)
        if reservation is None:
            self.error = "Failed to update status: Reservation not found"
            return False
        if reservation.get("status") == COMPLETED and status != COMPLETED:
            self.message = COMPLETED_LOCKED
            return False
        if status not in STATUSES:
            self.error = "Failed to update status: Invalid status"
            return False
        try:
            data = await self.api.update_reservation(reservation_id, status)
        except ApiError as e:
            logger.error(f"Failed to update reservation {reservation_id}: {e}")
            self.error = f"Failed to update status: {e.reason}"
            return False
        reservation["status"] = status
        if isinstance(data, dict) and data.get("soldAt"):
            reservation["soldAt"] = data["soldAt"]
        self.error = None
        self.message = STATUS_UPDATED
        return True
