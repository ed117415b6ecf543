"""
In-memory connection manager for the chat WebSocket: subscribe/unsubscribe/broadcast by chat_id.

Every subscription and every scheduled broadcast takes a number from one
sequence. A broadcast only reaches sockets that joined before it was issued;
later joiners already received a fresher snapshot when they subscribed.
"""
import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks WebSocket connections per chat and pushes events to them."""

    def __init__(self) -> None:
        # chat_id -> {WebSocket: sequence number at join}
        self._chats: Dict[str, Dict[WebSocket, int]] = {}
        self._lock = asyncio.Lock()
        self._seq = 0
        self._tasks: Set["asyncio.Task[None]"] = set()

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    async def subscribe(
        self,
        websocket: WebSocket,
        chat_id: str,
        initial: Optional[Callable[[], Any]] = None,
        event: str = "snapshot",
    ) -> None:
        """Join chat_id. initial() is loaded and sent before the socket can receive broadcasts."""
        async with self._lock:
            if initial is not None:
                await self.send(websocket, event, chat_id, initial())
            self._chats.setdefault(chat_id, {})[websocket] = self._next_seq()
        logger.debug("Subscribed ws to chat %s", chat_id)

    async def unsubscribe(self, websocket: WebSocket, chat_id: str) -> None:
        async with self._lock:
            if chat_id in self._chats:
                self._chats[chat_id].pop(websocket, None)
                if not self._chats[chat_id]:
                    del self._chats[chat_id]
        logger.debug("Unsubscribed ws from chat %s", chat_id)

    async def unsubscribe_all(self, websocket: WebSocket, chat_ids: Set[str]) -> None:
        for cid in list(chat_ids):
            await self.unsubscribe(websocket, cid)

    def subscriber_count(self, chat_id: str) -> int:
        return len(self._chats.get(chat_id) or ())

    @property
    def pending_broadcasts(self) -> int:
        return len(self._tasks)

    @staticmethod
    def encode(event: str, chat_id: str, payload: Any) -> str:
        return json.dumps({
            "event": event,
            "chat_id": chat_id,
            "payload": payload,
        }, default=str)

    async def send(self, websocket: WebSocket, event: str, chat_id: str, payload: Any) -> None:
        """Send one event to a single connection (e.g. the initial snapshot)."""
        await websocket.send_text(self.encode(event, chat_id, payload))

    async def broadcast_to_chat(
        self,
        chat_id: str,
        event: str,
        payload: Any,
        issued: Optional[int] = None,
    ) -> None:
        """Send JSON event to all connections subscribed to this chat (joined before issued)."""
        msg = self.encode(event, chat_id, payload)
        async with self._lock:
            sockets = [
                ws for ws, joined in (self._chats.get(chat_id) or {}).items()
                if issued is None or joined < issued
            ]
        dead = []
        for ws in sockets:
            try:
                await ws.send_text(msg)
            except Exception as e:
                logger.warning("Broadcast send failed: %s", e)
                dead.append(ws)
        if dead:
            async with self._lock:
                for ws in dead:
                    if chat_id in self._chats:
                        self._chats[chat_id].pop(ws, None)
                if chat_id in self._chats and not self._chats[chat_id]:
                    del self._chats[chat_id]

    def broadcast_to_chat_sync(self, chat_id: str, event: str, payload: Any) -> None:
        """Fire-and-forget broadcast from sync code (e.g. after create message)."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (e.g. in tests); skip broadcast
            return
        task = loop.create_task(
            self.broadcast_to_chat(chat_id, event, payload, issued=self._next_seq())
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self) -> None:
        """Wait for scheduled broadcasts to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


connection_manager = ConnectionManager()
