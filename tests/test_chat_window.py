"""
Tests for the chat window wiring identity, role, feed, details and composer.
"""
import asyncio

import pytest

from thriftfinder.client.chat_window import ChatWindow
from thriftfinder.client.errors import AuthenticationRequired
from thriftfinder.client.feed import InMemorySnapshotSource
from thriftfinder.client.identity import IdentityResolver

CHAT_ID = "user1_user2"


def mock_chat(mock_api, chat_id=CHAT_ID, other="user2", name="Thandi"):
    mock_api.get(f"/api/stores/chats/{chat_id}").respond(200, json={
        "chatId": chat_id,
        "participants": chat_id.split("_"),
        "itemId": "item1",
        "storeId": "store1",
    })
    mock_api.get(f"/api/stores/users/{other}").respond(200, json={"displayName": name})


@pytest.fixture
def source():
    return InMemorySnapshotSource()


@pytest.fixture
def window(api, identity, source, mock_api):
    mock_api.post("/api/auth/getRole").respond(200, json={"role": "customer"})
    mock_api.get("/api/stores/items/item1").respond(200, json={"itemId": "item1", "name": "Denim Jacket"})
    mock_api.get("/api/stores/store1").respond(200, json={"storeId": "store1", "storeName": "Vintage Store"})
    return ChatWindow(api, identity, source=source)


@pytest.mark.unit
class TestChatWindow:

    async def test_open(self, window, source, mock_api):
        mock_chat(mock_api)
        source.seed(CHAT_ID, [])

        await window.open(CHAT_ID)

        assert window.header == "Chat with Thandi"
        assert window.suggestions[0] == "Is this item available?"
        assert window.feed.state.empty_state == "No messages yet. Start the conversation!"
        assert window.composer.item_id == "item1"
        assert window.banners == []

    async def test_requires_identity(self, api, source):
        window = ChatWindow(api, IdentityResolver(), source=source)
        with pytest.raises(AuthenticationRequired):
            await window.open(CHAT_ID)

    async def test_switch_moves_subscription(self, window, source, mock_api):
        mock_chat(mock_api)
        mock_chat(mock_api, chat_id="user1_user3", other="user3", name="Naledi")

        await window.open(CHAT_ID)
        await window.switch("user1_user3")

        assert source.subscriber_count(CHAT_ID) == 0
        assert source.subscriber_count("user1_user3") == 1
        assert window.header == "Chat with Naledi"
        assert window.composer.chat_id == "user1_user3"

    async def test_sign_out_closes(self, window, identity, source, mock_api):
        mock_chat(mock_api)
        await window.open(CHAT_ID)

        identity.sign_out()
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert source.subscriber_count(CHAT_ID) == 0
        assert window.chat_id is None

    async def test_banners_collect_section_errors(self, window, source, mock_api):
        mock_api.get(f"/api/stores/chats/{CHAT_ID}").respond(404, json={"detail": {"message": "Chat not found"}})
        await window.open(CHAT_ID)
        assert "Chat not found" in window.banners
