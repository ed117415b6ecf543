"""
Real-time message feed.

Subscribes to the full ordered message list of one chat and re-renders it
wholesale on every snapshot. Unread messages addressed to the current user
trigger one best-effort mark-read request per snapshot.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Set
from urllib.parse import quote

import websockets

from thriftfinder.client.api import ApiClient
from thriftfinder.client.errors import ApiError, AuthenticationRequired, SubscriptionError
from thriftfinder.client.formatting import format_message_date
from thriftfinder.client.identity import IdentityResolver
from thriftfinder.core.config import settings

logger = logging.getLogger(__name__)

EMPTY_STATE = "No messages yet. Start the conversation!"
READ_RECEIPT = "✓✓"
DELIVERED_RECEIPT = "✓"
SESSION_CLOSE_CODE = 4001
SESSION_REJECTED = "Session expired or invalid"

SnapshotCallback = Callable[[str, List[Dict[str, Any]]], None]
ErrorCallback = Callable[[Exception], None]


class Subscription(Protocol):
    async def close(self) -> None: ...


class SnapshotSource(Protocol):
    """Delivers complete, timestamp-ordered message lists for one chat."""

    async def subscribe(
        self, chat_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback
    ) -> Subscription: ...


@dataclass
class MessageView:
    message_id: str
    text: str
    timestamp: Any
    sender_id: str
    receiver_id: str
    direction: str  # "sent" | "received"
    read_state: str  # "read" | "unread"
    receipt: Optional[str] = None

    @property
    def time_label(self) -> str:
        return format_message_date(self.timestamp)

    @classmethod
    def from_payload(cls, data: Dict[str, Any], uid: str) -> "MessageView":
        sent = data.get("senderId") == uid
        read = bool(data.get("read"))
        receipt = None
        if sent:
            receipt = READ_RECEIPT if read else DELIVERED_RECEIPT
        return cls(
            message_id=data.get("messageId", ""),
            text=data.get("message", ""),
            timestamp=data.get("timestamp"),
            sender_id=data.get("senderId", ""),
            receiver_id=data.get("receiverId", ""),
            direction="sent" if sent else "received",
            read_state="read" if read else "unread",
            receipt=receipt,
        )


class _WebSocketSubscription:
    def __init__(self, ws, task: "asyncio.Task[None]"):
        self._ws = ws
        self._task = task

    async def close(self) -> None:
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        await self._ws.close()


class WebSocketSnapshotSource:
    """Snapshot source backed by the /api/stores/ws endpoint."""

    def __init__(self, identity: IdentityResolver, ws_url: Optional[str] = None):
        self.identity = identity
        self.ws_url = (ws_url or settings.ws_url).rstrip("/")

    async def subscribe(
        self, chat_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback
    ) -> Subscription:
        token = await self.identity.get_token()
        url = f"{self.ws_url}/api/stores/ws?token={quote(token)}"
        try:
            ws = await websockets.connect(url)
        except (OSError, websockets.WebSocketException) as e:
            raise SubscriptionError(str(e) or e.__class__.__name__)
        try:
            await ws.send(json.dumps({"action": "subscribe", "chat_id": chat_id}))
        except websockets.ConnectionClosed as e:
            await ws.close()
            raise _closed_error(e)
        task = asyncio.create_task(self._reader(ws, on_snapshot, on_error))
        return _WebSocketSubscription(ws, task)

    async def _reader(self, ws, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> None:
        try:
            async for raw in ws:
                try:
                    event = json.loads(raw)
                except json.JSONDecodeError:
                    logger.warning("Dropping malformed frame")
                    continue
                if event.get("event") == "snapshot":
                    on_snapshot(event.get("chat_id", ""), event.get("payload") or [])
                elif event.get("event") == "error":
                    on_error(SubscriptionError(event.get("message") or event.get("code", "")))
        except websockets.ConnectionClosedOK:
            return
        except websockets.ConnectionClosed as e:
            on_error(_closed_error(e))


def _closed_error(e: "websockets.ConnectionClosed") -> SubscriptionError:
    # The server closes with 4001 when the token has no live session.
    if e.rcvd is not None and e.rcvd.code == SESSION_CLOSE_CODE:
        return SubscriptionError(SESSION_REJECTED)
    return SubscriptionError(str(e))


class _MemorySubscription:
    def __init__(self, source: "InMemorySnapshotSource", chat_id: str, entry):
        self._source = source
        self._chat_id = chat_id
        self._entry = entry

    async def close(self) -> None:
        entries = self._source._subscribers.get(self._chat_id, [])
        if self._entry in entries:
            entries.remove(self._entry)


class InMemorySnapshotSource:
    """Local snapshot source; push() delivers a snapshot to every live subscriber."""

    def __init__(self) -> None:
        self._latest: Dict[str, List[Dict[str, Any]]] = {}
        self._subscribers: Dict[str, list] = {}
        self._failures: Dict[str, Exception] = {}

    def seed(self, chat_id: str, messages: List[Dict[str, Any]]) -> None:
        self._latest[chat_id] = list(messages)

    def fail_next(self, chat_id: str, error: Exception) -> None:
        """Make the next subscribe() for chat_id raise error."""
        self._failures[chat_id] = error

    def subscriber_count(self, chat_id: str) -> int:
        return len(self._subscribers.get(chat_id, []))

    async def subscribe(
        self, chat_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback
    ) -> Subscription:
        if chat_id in self._failures:
            raise self._failures.pop(chat_id)
        entry = (on_snapshot, on_error)
        self._subscribers.setdefault(chat_id, []).append(entry)
        if chat_id in self._latest:
            on_snapshot(chat_id, list(self._latest[chat_id]))
        return _MemorySubscription(self, chat_id, entry)

    def push(self, chat_id: str, messages: List[Dict[str, Any]]) -> None:
        self._latest[chat_id] = list(messages)
        for on_snapshot, _ in list(self._subscribers.get(chat_id, [])):
            on_snapshot(chat_id, list(messages))

    def error(self, chat_id: str, error: Exception) -> None:
        for _, on_error in list(self._subscribers.get(chat_id, [])):
            on_error(error)


@dataclass
class FeedState:
    chat_id: Optional[str] = None
    loading: bool = False
    messages: List[MessageView] = field(default_factory=list)
    error: Optional[str] = None
    notice: Optional[str] = None

    @property
    def empty_state(self) -> Optional[str]:
        if self.loading or self.error or self.messages:
            return None
        return EMPTY_STATE


class MessageFeed:

    def __init__(self, api: ApiClient, identity: IdentityResolver, source: SnapshotSource):
        self.api = api
        self.identity = identity
        self.source = source
        self.state = FeedState()
        self._uid: Optional[str] = None
        self._subscription: Optional[Subscription] = None
        self._generation = 0
        self._pending: Set["asyncio.Task[None]"] = set()

    async def open(self, chat_id: str) -> None:
        """Subscribe to chat_id, releasing any previous subscription first."""
        await self.close()
        self._uid = self.identity.require_user().uid
        self._generation += 1
        generation = self._generation
        self.state = FeedState(chat_id=chat_id, loading=True)
        try:
            subscription = await self.source.subscribe(
                chat_id,
                lambda cid, payload: self._on_snapshot(generation, cid, payload),
                lambda exc: self._on_error(generation, exc),
            )
        except (SubscriptionError, ApiError) as e:
            self._on_error(generation, e)
            return
        if generation != self._generation:
            await subscription.close()
            return
        self._subscription = subscription

    async def close(self) -> None:
        """Stop delivering snapshots to this view."""
        self._generation += 1
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.close()

    async def wait_idle(self) -> None:
        """Wait for outstanding mark-read requests."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_snapshot(self, generation: int, chat_id: str, payload: List[Dict[str, Any]]) -> None:
        if generation != self._generation or chat_id != self.state.chat_id:
            return
        uid = self._uid
        self.state.messages = [MessageView.from_payload(m, uid) for m in payload]
        self.state.loading = False
        self.state.error = None
        has_unread = any(m.get("receiverId") == uid and not m.get("read") for m in payload)
        if has_unread:
            task = asyncio.get_running_loop().create_task(self._mark_read(generation, chat_id))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    def _on_error(self, generation: int, exc: Exception) -> None:
        if generation != self._generation:
            return
        logger.error(f"Message subscription failed for {self.state.chat_id}: {exc}")
        self.state.loading = False
        self.state.error = f"Failed to load messages: {exc}"

    async def _mark_read(self, generation: int, chat_id: str) -> None:
        try:
            await self.api.mark_chat_read(chat_id)
        except (ApiError, AuthenticationRequired) as e:
            logger.error(f"Failed to mark messages as read in {chat_id}: {e}")
            if generation == self._generation:
                self.state.notice = f"Failed to mark messages as read: {e}"
