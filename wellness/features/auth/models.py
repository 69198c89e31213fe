from beanie import Document, Indexed
from pydantic import EmailStr, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum
from wellness.shared.models import TimestampMixin


class UserRole(str, Enum):
    """Roles a practice user can hold."""
    ADMIN = "admin"
    PROVIDER = "provider"
    STAFF = "staff"


class UserStatus(str, Enum):
    """Account status of a practice user."""
    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


class User(Document, TimestampMixin):
    """User document model."""

    email: Indexed(EmailStr, unique=True)
    name: str
    role: UserRole = UserRole.STAFF
    status: UserStatus = UserStatus.PENDING

    # Unset until the user completes registration
    password_hash: Optional[str] = None

    phone: Optional[str] = None
    title: Optional[str] = None
    specialty: Optional[str] = None
    npi: Optional[str] = None
    last_login: Optional[datetime] = None

    # Invitation metadata
    invited_by: Optional[str] = None  # References User._id of the inviting admin
    invite_token: Optional[str] = None
    invitation_sent_at: Optional[datetime] = None

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    class Settings:
        name = "users"
        use_state_management = True
        indexes = [
            "role",
            "status",
            "invite_token",
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "email": "provider@example.com",
                "name": "Dr. Jane Smith",
                "role": "provider",
                "status": "active",
            }
        }
