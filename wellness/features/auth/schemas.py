from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

from wellness.features.auth.models import UserRole, UserStatus


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """User response schema."""

    id: str
    email: EmailStr
    name: str
    role: UserRole
    status: UserStatus
    phone: Optional[str] = None
    title: Optional[str] = None
    specialty: Optional[str] = None
    npi: Optional[str] = None
    last_login: Optional[datetime] = None
    invited_by: Optional[str] = None
    invitation_sent_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
