from thriftfinder.client.actions import ActionResult, CatalogFilters, CatalogView
from thriftfinder.client.api import ApiClient
from thriftfinder.client.chat_window import ChatWindow
from thriftfinder.client.composer import MessageComposer
from thriftfinder.client.details import ChatDetailLoader, ChatDetails
from thriftfinder.client.errors import ApiError, AuthenticationRequired, SubscriptionError
from thriftfinder.client.feed import (
    InMemorySnapshotSource,
    MessageFeed,
    SnapshotSource,
    WebSocketSnapshotSource,
)
from thriftfinder.client.identity import CurrentUser, IdentityResolver
from thriftfinder.client.reservations import ReservationFilters, ReservationsView
from thriftfinder.client.roles import RoleResolver
from thriftfinder.utils.chat_ids import derive_chat_id, other_participant

__all__ = [
    "ActionResult",
    "ApiClient",
    "ApiError",
    "AuthenticationRequired",
    "CatalogFilters",
    "CatalogView",
    "ChatDetailLoader",
    "ChatDetails",
    "ChatWindow",
    "CurrentUser",
    "IdentityResolver",
    "InMemorySnapshotSource",
    "MessageComposer",
    "MessageFeed",
    "ReservationFilters",
    "ReservationsView",
    "RoleResolver",
    "SnapshotSource",
    "SubscriptionError",
    "WebSocketSnapshotSource",
    "derive_chat_id",
    "other_participant",
]
