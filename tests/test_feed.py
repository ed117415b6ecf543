"""
Unit tests for the real-time message feed.
"""
import pytest

from thriftfinder.client.errors import SubscriptionError
from thriftfinder.client.feed import (
    EMPTY_STATE,
    InMemorySnapshotSource,
    MessageFeed,
)

CHAT_ID = "user1_user2"
READ_PATH = f"/api/stores/chats/{CHAT_ID}/read"


def message(message_id, sender, receiver, text, ts, read=False):
    return {
        "messageId": message_id,
        "chatId": CHAT_ID,
        "senderId": sender,
        "receiverId": receiver,
        "message": text,
        "timestamp": ts,
        "read": read,
    }


SEEDED = [
    message("m1", "user1", "user2", "Is this item available?", "2025-03-05T10:00:00Z", read=True),
    message("m2", "user2", "user1", "Yes, available for pickup.", "2025-03-05T10:01:00Z"),
]


@pytest.fixture
def source():
    return InMemorySnapshotSource()


@pytest.fixture
def feed(api, identity, source):
    return MessageFeed(api, identity, source)


@pytest.mark.unit
class TestSnapshots:

    async def test_seeded_chat(self, feed, source, mock_api):
        """Both messages in order, double check on the read sent message, one read receipt."""
        route = mock_api.put(READ_PATH).respond(200, json={"message": "Messages marked as read", "updated": 1})
        source.seed(CHAT_ID, SEEDED)

        await feed.open(CHAT_ID)
        await feed.wait_idle()

        views = feed.state.messages
        assert [v.message_id for v in views] == ["m1", "m2"]
        assert (views[0].direction, views[0].read_state, views[0].receipt) == ("sent", "read", "✓✓")
        assert (views[1].direction, views[1].read_state, views[1].receipt) == ("received", "unread", None)
        assert route.call_count == 1
        assert feed.state.empty_state is None
        assert views[0].time_label == "Mar 5, 2025, 12:00 PM"

    async def test_keeps_delivered_order(self, feed, source, mock_api):
        mock_api.put(READ_PATH).respond(200, json={})
        delivered = [
            message("b", "user2", "user1", "second", "2025-03-05T10:05:00Z", read=True),
            message("a", "user1", "user2", "first", "2025-03-05T10:00:00Z"),
        ]
        await feed.open(CHAT_ID)
        source.push(CHAT_ID, delivered)
        assert [v.message_id for v in feed.state.messages] == ["b", "a"]

    async def test_one_read_receipt_per_snapshot(self, feed, source, mock_api):
        route = mock_api.put(READ_PATH).respond(200, json={})
        await feed.open(CHAT_ID)
        source.push(CHAT_ID, SEEDED)
        source.push(CHAT_ID, SEEDED + [message("m3", "user2", "user1", "Hello?", "2025-03-05T10:02:00Z")])
        await feed.wait_idle()
        assert route.call_count == 2

    async def test_no_receipt_when_nothing_unread_for_me(self, feed, source, mock_api):
        route = mock_api.put(READ_PATH).respond(200, json={})
        await feed.open(CHAT_ID)
        source.push(CHAT_ID, [message("m1", "user1", "user2", "Hi", "2025-03-05T10:00:00Z")])
        await feed.wait_idle()
        assert not route.called
        assert feed.state.messages[0].receipt == "✓"

    async def test_receipt_failure_is_a_notice(self, feed, source, mock_api):
        mock_api.put(READ_PATH).respond(503, json={"detail": {"code": "SERVICE_ERROR", "message": "down"}})
        source.seed(CHAT_ID, SEEDED)
        await feed.open(CHAT_ID)
        await feed.wait_idle()
        assert feed.state.notice == "Failed to mark messages as read: down"
        assert feed.state.error is None
        assert len(feed.state.messages) == 2

    async def test_empty_snapshot(self, feed, source):
        source.seed(CHAT_ID, [])
        await feed.open(CHAT_ID)
        assert feed.state.messages == []
        assert feed.state.empty_state == EMPTY_STATE

    async def test_loading_has_no_empty_state(self, feed):
        await feed.open(CHAT_ID)
        assert feed.state.loading
        assert feed.state.empty_state is None


@pytest.mark.unit
class TestSubscriptionLifecycle:

    async def test_subscribe_failure(self, feed, source):
        source.fail_next(CHAT_ID, SubscriptionError("permission-denied"))
        await feed.open(CHAT_ID)
        assert feed.state.error == "Failed to load messages: permission-denied"
        assert feed.state.empty_state is None

    async def test_error_after_snapshots_keeps_messages(self, feed, source, mock_api):
        mock_api.put(READ_PATH).respond(200, json={})
        source.seed(CHAT_ID, SEEDED)
        await feed.open(CHAT_ID)
        source.error(CHAT_ID, SubscriptionError("permission-denied"))
        assert feed.state.error == "Failed to load messages: permission-denied"
        assert len(feed.state.messages) == 2

    async def test_close_stops_updates(self, feed, source):
        await feed.open(CHAT_ID)
        source.push(CHAT_ID, [])
        await feed.close()
        assert source.subscriber_count(CHAT_ID) == 0
        source.push(CHAT_ID, [message("m9", "user1", "user2", "late", "2025-03-05T11:00:00Z")])
        assert feed.state.messages == []

    async def test_switch_releases_previous_chat(self, feed, source):
        await feed.open(CHAT_ID)
        await feed.open("user1_user3")
        assert source.subscriber_count(CHAT_ID) == 0
        assert source.subscriber_count("user1_user3") == 1

    async def test_ignores_other_chat_ids(self, api, identity):
        class StraySource:
            async def subscribe(self, chat_id, on_snapshot, on_error):
                self.on_snapshot = on_snapshot
                return self

            async def close(self):
                pass

        stray = StraySource()
        feed = MessageFeed(api, identity, stray)
        await feed.open(CHAT_ID)
        stray.on_snapshot("user1_user3", [message("x", "user1", "user3", "wrong", "2025-03-05T10:00:00Z")])
        assert feed.state.messages == []
        assert feed.state.loading
