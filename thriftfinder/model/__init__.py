from thriftfinder.model.user import User
from thriftfinder.model.store import Store
from thriftfinder.model.item import Item
from thriftfinder.model.chat import Chat
from thriftfinder.model.message import Message
from thriftfinder.model.reservation import Reservation

__all__ = ["User", "Store", "Item", "Chat", "Message", "Reservation"]
