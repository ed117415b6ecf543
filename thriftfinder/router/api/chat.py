"""
Chat API: messages, chats and read receipts (REST). Snapshot WebSocket in same module.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, WebSocket, status
from sqlalchemy.orm import Session

from thriftfinder.chat.connection_manager import connection_manager
from thriftfinder.core.database import get_db, SessionLocal
from thriftfinder.core.dependencies import session_from_token, validate_session
from thriftfinder.schema.chat import (
    ChatListItem,
    ChatResponse,
    MarkReadResponse,
    MessageCreateBody,
    MessageResponse,
    SendMessageResponse,
)
from thriftfinder.service.chat_service import ChatService, SNAPSHOT_EVENT
from thriftfinder.utils.chat_ids import split_chat_id

router = APIRouter()
logger = logging.getLogger(__name__)


# --- REST: Messages ---

@router.post("/messages", response_model=SendMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    body: MessageCreateBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Send a message; creates the chat on first contact and pushes a snapshot to subscribers."""
    msg, _ = ChatService(db).send_message(
        sender_id=current_user["uid"],
        receiver_id=body.receiver_id,
        text=body.message,
        item_id=body.item_id,
        store_id=body.store_id,
    )
    return SendMessageResponse.model_validate(msg)


# --- REST: Chats ---

@router.get("/chats", response_model=List[ChatListItem])
async def list_chats(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Chats the current user participates in, newest first."""
    return ChatService(db).list_chats(uid=current_user["uid"])


@router.get("/chats/{chat_id}", response_model=ChatResponse)
async def get_chat(
    chat_id: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Chat metadata (participants, linked item and store)."""
    return ChatService(db).get_chat_for_user(chat_id=chat_id, uid=current_user["uid"])


@router.get("/chats/{chat_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    chat_id: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Messages of a chat in timestamp order."""
    service = ChatService(db)
    service.get_chat_for_user(chat_id=chat_id, uid=current_user["uid"])
    return service.snapshot(chat_id)


@router.put("/chats/{chat_id}/read", response_model=MarkReadResponse)
async def mark_chat_read(
    chat_id: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Mark every unread message addressed to the current user as read."""
    updated = ChatService(db).mark_read(chat_id=chat_id, uid=current_user["uid"])
    return MarkReadResponse(updated=updated)


# --- WebSocket ---

def _load_snapshot(chat_id: str) -> List[Dict[str, Any]]:
    db = SessionLocal()
    try:
        return ChatService(db).snapshot(chat_id)
    finally:
        db.close()


@router.websocket("/ws")
async def websocket_chat(
    websocket: WebSocket,
    token: Optional[str] = None,
):
    """Real-time snapshots: subscribe to chats, receive the full ordered message list on every change. Auth via ?token=."""
    await websocket.accept()
    session = session_from_token(token)
    if not session:
        await websocket.close(code=4001)
        return
    uid = session["uid"]

    async def send_error(code: str, message: str) -> None:
        try:
            await websocket.send_text(
                json.dumps({"event": "error", "code": code, "message": message})
            )
        except Exception as e:
            logger.debug("Error frame not delivered: %s", e)

    subscribed: set = set()
    try:
        while True:
            data = await websocket.receive_text()
            try:
                obj = json.loads(data)
            except json.JSONDecodeError:
                await send_error("INVALID_JSON", "Request body must be valid JSON.")
                continue
            if not isinstance(obj, dict):
                await send_error("INVALID_JSON", "Request body must be a JSON object.")
                continue
            action = obj.get("action")
            chat_id = obj.get("chat_id")
            if not chat_id or not isinstance(chat_id, str):
                await send_error("MISSING_CHAT_ID", "Missing required field: chat_id.")
                continue
            try:
                participants = split_chat_id(chat_id)
            except ValueError:
                participants = ()
            if uid not in participants:
                await send_error("FORBIDDEN", "You are not a participant of this chat.")
                continue
            if action == "subscribe":
                await connection_manager.subscribe(
                    websocket, chat_id, initial=lambda: _load_snapshot(chat_id), event=SNAPSHOT_EVENT
                )
                subscribed.add(chat_id)
            elif action == "unsubscribe":
                await connection_manager.unsubscribe(websocket, chat_id)
                subscribed.discard(chat_id)
            else:
                await send_error(
                    "UNKNOWN_ACTION",
                    "Expected action: subscribe or unsubscribe.",
                )
    except Exception as e:
        logger.warning("WebSocket closed: %s", e)
    finally:
        await connection_manager.unsubscribe_all(websocket, subscribed)
