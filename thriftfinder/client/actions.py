"""
Reservation and enquiry actions invoked from a store's catalog.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from thriftfinder.client.api import ApiClient
from thriftfinder.client.errors import ApiError
from thriftfinder.client.identity import IdentityResolver
from thriftfinder.utils.chat_ids import derive_chat_id

logger = logging.getLogger(__name__)

AVAILABLE = "Available"
RESERVED = "Reserved"
HIDDEN_STATUSES = ("Sold", "Out of Stock")

ENQUIRY_TEMPLATE = "Hey, I would like to enquire about the item {name}"


@dataclass
class ActionResult:
    ok: bool
    navigate_to: Optional[str] = None
    alert: Optional[str] = None
    reservation_id: Optional[str] = None
    message_id: Optional[str] = None


@dataclass
class CatalogFilters:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    size: Optional[str] = None
    style: Optional[str] = None
    category: Optional[str] = None


def _price(item: Dict[str, Any]) -> Optional[Decimal]:
    try:
        return Decimal(str(item.get("price")))
    except (InvalidOperation, ValueError):
        return None


class CatalogView:
    """A store and its items held in local state, with the shopper's actions."""

    def __init__(
        self,
        api: ApiClient,
        identity: IdentityResolver,
        store: Dict[str, Any],
        items: List[Dict[str, Any]],
    ):
        self.api = api
        self.identity = identity
        self.store = store
        self.items = items
        self.alert: Optional[str] = None

    @classmethod
    async def load(cls, api: ApiClient, identity: IdentityResolver, store_id: str) -> "CatalogView":
        store = await api.get_store(store_id)
        items = await api.get_store_items(store_id)
        return cls(api, identity, store, items)

    @property
    def store_id(self) -> Optional[str]:
        return self.store.get("storeId")

    def find_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        return next((i for i in self.items if i.get("itemId") == item_id), None)

    def can_reserve(self, item_id: str) -> bool:
        item = self.find_item(item_id)
        return bool(item) and item.get("status") == AVAILABLE

    def _chat_with_owner(self, uid: str) -> Optional[str]:
        owner_id = self.store.get("ownerId")
        return derive_chat_id(uid, owner_id) if owner_id else None

    def _fail(self, alert: str) -> ActionResult:
        self.alert = alert
        return ActionResult(ok=False, alert=alert)

    async def reserve(self, item_id: str) -> ActionResult:
        """Reserve an available item and navigate into the chat with the store owner."""
        uid = self.identity.require_user().uid
        self.alert = None
        item = self.find_item(item_id)
        if not item:
            return self._fail("Item not found")
        if item.get("status") != AVAILABLE:
            return self._fail("Failed to reserve item: Item is not available")

        try:
            data = await self.api.reserve_item(item_id, self.store_id)
            if not data.get("reservationId"):
                raise ApiError("No reservation id returned")
        except ApiError as e:
            logger.error(f"Failed to reserve item {item_id}: {e}")
            return self._fail(f"Failed to reserve item: {e.reason}")

        item["status"] = RESERVED
        logger.info(f"Reserved item {item_id} (reservation {data['reservationId']})")
        return ActionResult(
            ok=True,
            navigate_to=self._chat_with_owner(uid) or data.get("chatId"),
            reservation_id=data["reservationId"],
            message_id=data.get("messageId"),
        )

    async def enquire(self, item_id: str) -> ActionResult:
        """Message the store owner about an item; item state is unchanged."""
        uid = self.identity.require_user().uid
        self.alert = None
        item = self.find_item(item_id)
        if not item:
            return self._fail("Item not found")
        owner_id = self.store.get("ownerId")
        if not owner_id:
            return self._fail("Failed to send enquiry: Store owner not found")

        try:
            data = await self.api.send_message(
                owner_id,
                ENQUIRY_TEMPLATE.format(name=item.get("name", "")),
                item_id=item_id,
                store_id=self.store_id,
            )
        except ApiError as e:
            logger.error(f"Failed to send enquiry for {item_id}: {e}")
            return self._fail(f"Failed to send enquiry: {e.reason}")

        return ActionResult(
            ok=True,
            navigate_to=derive_chat_id(uid, owner_id),
            message_id=data.get("messageId"),
        )

    def visible_items(self, filters: Optional[CatalogFilters] = None) -> List[Dict[str, Any]]:
        """Catalog items matching filters; sold items are never shown."""
        f = filters or CatalogFilters()
        visible = []
        for item in self.items:
            if item.get("status") in HIDDEN_STATUSES:
                continue
            price = _price(item)
            if f.min_price is not None and (price is None or price < f.min_price):
                continue
            if f.max_price is not None and (price is None or price > f.max_price):
                continue
            if f.size and item.get("size") != f.size:
                continue
            if f.style and item.get("style") != f.style:
                continue
            if f.category and item.get("category") != f.category:
                continue
            visible.append(item)
        return visible
