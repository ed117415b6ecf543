"""
Unit tests for the chat service: canonical chats, timestamps and read receipts.
"""
import pytest

from conftest import CUSTOMER_UID, OWNER_UID, STORE_ID
from thriftfinder.core.exceptions import NotFound
from thriftfinder.crud import chat_crud
from thriftfinder.service.chat_service import ChatService
from thriftfinder.utils.chat_ids import is_canonical


@pytest.mark.unit
class TestChatService:

    def test_timestamps_strictly_increase(self, seeded):
        service = ChatService(seeded)
        stamps = [
            service.send_message(sender_id=CUSTOMER_UID, receiver_id=OWNER_UID, text=f"m{i}")[0].timestamp
            for i in range(5)
        ]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    def test_chat_stays_canonical(self, seeded):
        service = ChatService(seeded)
        _, chat = service.send_message(sender_id=OWNER_UID, receiver_id=CUSTOMER_UID, text="Hi")
        assert chat.chat_id == "user1_user2"
        assert is_canonical(chat.chat_id, chat.participants)

    def test_summary_follows_latest_message(self, seeded):
        service = ChatService(seeded)
        service.send_message(sender_id=CUSTOMER_UID, receiver_id=OWNER_UID, text="first")
        msg, _ = service.send_message(
            sender_id=OWNER_UID, receiver_id=CUSTOMER_UID, text="second", item_id="item1", store_id=STORE_ID
        )
        chat = chat_crud.get(seeded, "user1_user2")
        assert chat.last_message == "second"
        assert chat.item_id == "item1"

    def test_snapshot_is_camel_case_and_ordered(self, seeded):
        service = ChatService(seeded)
        service.send_message(sender_id=CUSTOMER_UID, receiver_id=OWNER_UID, text="a")
        service.send_message(sender_id=OWNER_UID, receiver_id=CUSTOMER_UID, text="b")
        snapshot = service.snapshot("user1_user2")
        assert [m["message"] for m in snapshot] == ["a", "b"]
        assert {"messageId", "chatId", "senderId", "receiverId", "timestamp", "read"} <= set(snapshot[0])

    def test_mark_read_counts(self, seeded):
        service = ChatService(seeded)
        service.send_message(sender_id=OWNER_UID, receiver_id=CUSTOMER_UID, text="one")
        service.send_message(sender_id=OWNER_UID, receiver_id=CUSTOMER_UID, text="two")
        assert service.mark_read(chat_id="user1_user2", uid=CUSTOMER_UID) == 2
        assert service.mark_read(chat_id="user1_user2", uid=CUSTOMER_UID) == 0

    def test_mark_read_malformed_chat(self, seeded):
        with pytest.raises(NotFound):
            ChatService(seeded).mark_read(chat_id="garbage", uid=CUSTOMER_UID)
