"""Pydantic schemas for user API endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserCreateRequest(BaseModel):
    """Request schema for account creation."""

    email: str
    secret: str
    handle: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language: Optional[str] = None


class UserCreateResponse(BaseModel):
    user_id: str


class UserUpdateRequest(BaseModel):
    """Partial update; omitted fields stay unchanged, null clears a name."""

    email: Optional[str] = None
    secret: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language: Optional[str] = None
    active: Optional[bool] = None


class SecretUpdateRequest(BaseModel):
    secret: str


class UserResponse(BaseModel):
    """Public view of an account. Never carries the secret hash."""

    user_id: str
    email: str
    handle: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language: str
    active: bool
    created_at: datetime
    updated_at: datetime
