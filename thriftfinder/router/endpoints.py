"""
API Router - all endpoints.
"""
from fastapi import APIRouter
from thriftfinder.router.api import auth, chat, reservations, stores

api_router = APIRouter(prefix="/api")

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

# Static /stores/... paths must be registered before /stores/{store_id}
api_router.include_router(
    chat.router,
    prefix="/stores",
    tags=["Chat"],
)

api_router.include_router(
    reservations.router,
    prefix="/stores",
    tags=["Reservations"],
)

api_router.include_router(
    stores.router,
    prefix="/stores",
    tags=["Stores"],
)
