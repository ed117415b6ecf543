"""
Authentication schemas.
"""
from pydantic import BaseModel, EmailStr
from typing import Optional

from thriftfinder.schema.base import CamelModel


class UserRegister(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: str


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class SignupResponse(BaseModel):
    success: bool = True
    uid: str
    email: str
    message: str


class UserInfo(CamelModel):
    uid: str
    email: str
    display_name: Optional[str] = None
    role: str


class LoginResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserInfo


class RoleRequest(BaseModel):
    uid: Optional[str] = None


class RoleResponse(BaseModel):
    role: str


class MessageResponse(BaseModel):
    message: str
