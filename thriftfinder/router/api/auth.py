"""
Authentication router - signup/login/logout and role lookup.
"""
from typing import Dict, Any
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from thriftfinder.core.database import get_db
from thriftfinder.core.dependencies import validate_session, get_current_token
from thriftfinder.core.exceptions import NotFound
from thriftfinder.crud import user_crud
from thriftfinder.service.auth_service import AuthService
from thriftfinder.schema.auth import (
    LoginResponse,
    MessageResponse,
    RoleRequest,
    RoleResponse,
    SignupResponse,
    UserLogin,
    UserRegister,
)
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """Register a new customer or store owner."""
    return AuthService(db).register_user(user_data)


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db)
):
    """Login and get a bearer token."""
    return AuthService(db).login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db)
):
    """Logout - invalidates token server-side and signs out from Cognito."""
    token = get_current_token(request)
    AuthService(db).logout(token, current_user)
    logger.info(f"User logged out: {current_user['uid']}")
    return MessageResponse(message="Logged out successfully")


@router.post("/getRole", response_model=RoleResponse)
async def get_role(
    body: RoleRequest,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Map a uid to its role (customer, storeOwner or admin)."""
    role = user_crud.get_role(db, body.uid) if body.uid else None
    if not role:
        raise NotFound("User")
    return RoleResponse(role=role)


@router.get("/user", response_model=RoleResponse)
async def get_own_role(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Role of the signed-in user."""
    role = user_crud.get_role(db, current_user["uid"])
    if not role:
        raise NotFound("User")
    return RoleResponse(role=role)
