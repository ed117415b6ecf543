from thriftfinder.crud.user_crud import user_crud
from thriftfinder.crud.store_crud import store_crud
from thriftfinder.crud.item_crud import item_crud
from thriftfinder.crud.chat_crud import chat_crud
from thriftfinder.crud.message_crud import message_crud
from thriftfinder.crud.reservation_crud import reservation_crud

__all__ = [
    "user_crud",
    "store_crud",
    "item_crud",
    "chat_crud",
    "message_crud",
    "reservation_crud",
]
