# Users Feature - Schemas

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

from wellness.features.auth.models import UserRole, UserStatus
from wellness.features.auth.schemas import UserResponse
from wellness.shared.schemas import Pagination


def _validate_password(v: str) -> str:
    if len(v) < 8:
        raise ValueError('Password must be at least 8 characters long')
    if not any(c.isupper() for c in v):
        raise ValueError('Password must contain at least one uppercase letter')
    if not any(c.islower() for c in v):
        raise ValueError('Password must contain at least one lowercase letter')
    if not any(c.isdigit() for c in v):
        raise ValueError('Password must contain at least one digit')
    return v


# ============== Direct Create / Update ==============

class CreateUserRequest(BaseModel):
    """Request schema for an administrator creating an active user directly."""

    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.STAFF
    password: str = Field(..., min_length=8, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    title: Optional[str] = Field(None, max_length=100)
    specialty: Optional[str] = Field(None, max_length=100)
    npi: Optional[str] = Field(None, max_length=20)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _validate_password(v)


class UpdateUserRequest(BaseModel):
    """Request schema for updating a user. Omitted fields are left as stored."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    phone: Optional[str] = Field(None, max_length=30)
    title: Optional[str] = Field(None, max_length=100)
    specialty: Optional[str] = Field(None, max_length=100)
    npi: Optional[str] = Field(None, max_length=20)


class UserListResponse(BaseModel):
    """Response schema for a page of users."""

    users: List[UserResponse]
    pagination: Pagination


# ============== Invitations ==============

class InviteUserRequest(BaseModel):
    """Request schema for inviting a new practice user."""

    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.STAFF


class InvitationResponse(BaseModel):
    """Summary of a sent invitation."""

    id: str
    email: EmailStr
    name: str
    role: UserRole
    status: UserStatus
    invited_by: Optional[str] = None
    invitation_sent_at: Optional[datetime] = None
    email_sent: bool


class VerifyInvitationResponse(BaseModel):
    """Whether an invitation link is still usable."""

    valid: bool
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None


class AcceptInvitationRequest(BaseModel):
    """Request schema for completing registration from an invitation."""

    token: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _validate_password(v)
