"""
Unit tests for the reservations list and status updates.
"""
import json

import httpx
import pytest

from thriftfinder.client.errors import AuthenticationRequired
from thriftfinder.client.identity import IdentityResolver
from thriftfinder.client.reservations import (
    COMPLETED_LOCKED,
    SALES_VIEW,
    STATUS_UPDATED,
    UNKNOWN_ITEM,
    UNKNOWN_USER,
    ReservationFilters,
    ReservationsView,
)


def reservation_rows():
    return [
        {"reservationId": "r1", "itemId": "item1", "userId": "user1", "storeId": "store1",
         "status": "Pending", "reservedAt": "2025-03-05T10:00:00+00:00"},
        {"reservationId": "r2", "itemId": "item2", "userId": "user3", "storeId": "store1",
         "status": "Confirmed", "reservedAt": "2025-03-06T10:00:00+00:00"},
        {"reservationId": "r3", "itemId": "item3", "userId": "user1", "storeId": "store1",
         "status": "Completed", "reservedAt": "2025-03-01T10:00:00+00:00",
         "soldAt": "2025-03-02T10:00:00+00:00"},
    ]


@pytest.fixture
def mock_lookups(mock_api):
    mock_api.get("/api/stores/reservations").respond(200, json=reservation_rows())
    mock_api.get("/api/stores/items/item1").respond(
        200, json={"itemId": "item1", "name": "Denim Jacket", "category": "Outerwear"})
    mock_api.get("/api/stores/items/item2").respond(
        404, json={"detail": {"code": "NOT_FOUND", "message": "Item not found"}})
    mock_api.get("/api/stores/items/item3").respond(
        200, json={"itemId": "item3", "name": "Silk Scarf", "category": None})
    mock_api.get("/api/stores/users/user1").respond(
        200, json={"uid": "user1", "displayName": "Sipho"})
    mock_api.get("/api/stores/users/user3").mock(side_effect=httpx.ConnectError("refused"))
    return mock_api


@pytest.fixture
async def view(api, identity, mock_lookups):
    view = ReservationsView(api, identity)
    await view.load()
    return view


@pytest.mark.unit
class TestLoad:

    async def test_loads_items_and_users_with_fallbacks(self, view):
        assert view.error is None
        assert not view.loading
        assert view.items["item1"]["name"] == "Denim Jacket"
        assert view.items["item2"]["name"] == UNKNOWN_ITEM
        assert view.users["user3"]["displayName"] == UNKNOWN_USER

    async def test_list_failure(self, api, identity, mock_api):
        mock_api.get("/api/stores/reservations").respond(404, json={"detail": {"message": "User not found"}})
        view = ReservationsView(api, identity)
        await view.load()
        assert view.error == "Failed to load reservations: User not found"
        assert view.reservations == []

    async def test_requires_identity(self, api):
        with pytest.raises(AuthenticationRequired):
            await ReservationsView(api, IdentityResolver()).load()


@pytest.mark.unit
class TestVisible:

    async def test_active_and_sales_views(self, view):
        assert [r["reservationId"] for r in view.visible()] == ["r1", "r2"]
        sales = view.visible(ReservationFilters(view_mode=SALES_VIEW))
        assert [r["reservationId"] for r in sales] == ["r3"]

    async def test_status_filter(self, view):
        assert [r["reservationId"] for r in view.visible(ReservationFilters(status="Confirmed"))] == ["r2"]

    async def test_search_matches_item_or_customer(self, view):
        assert [r["reservationId"] for r in view.visible(ReservationFilters(search="denim"))] == ["r1"]
        assert [r["reservationId"] for r in view.visible(ReservationFilters(search="unknown user"))] == ["r2"]

    async def test_categories(self, view):
        assert view.categories == ["Outerwear", "Uncategorized"]
        assert view.visible(ReservationFilters(category="Outerwear"))[0]["reservationId"] == "r1"


@pytest.mark.unit
class TestUpdateStatus:

    async def test_success_updates_local_state(self, view, mock_api):
        route = mock_api.put("/api/stores/reservations/r2").respond(
            200, json={"reservationId": "r2", "status": "Completed", "soldAt": "2025-03-07T10:00:00+00:00"})
        assert await view.update_status("r2", "Completed")
        assert json.loads(route.calls.last.request.content) == {"status": "Completed"}
        assert view.find("r2")["status"] == "Completed"
        assert view.find("r2")["soldAt"] == "2025-03-07T10:00:00+00:00"
        assert view.message == STATUS_UPDATED
        assert [r["reservationId"] for r in view.visible()] == ["r1"]

    async def test_completed_is_locked_without_request(self, view, mock_api):
        route = mock_api.put("/api/stores/reservations/r3").respond(200, json={})
        assert not await view.update_status("r3", "Pending")
        assert view.message == COMPLETED_LOCKED
        assert view.find("r3")["status"] == "Completed"
        assert not route.called

    async def test_failure_keeps_status(self, view, mock_api):
        mock_api.put("/api/stores/reservations/r1").respond(
            403, json={"detail": {"code": "FORBIDDEN", "message": "Unauthorized to update this reservation"}})
        assert not await view.update_status("r1", "Confirmed")
        assert view.error == "Failed to update status: Unauthorized to update this reservation"
        assert view.find("r1")["status"] == "Pending"

    async def test_invalid_status_is_not_sent(self, view, mock_api):
        route = mock_api.put("/api/stores/reservations/r1").respond(200, json={})
        assert not await view.update_status("r1", "Shipped")
        assert view.error == "Failed to update status: Invalid status"
        assert not route.called
