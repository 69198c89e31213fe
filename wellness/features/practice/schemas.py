# Practice Settings Feature - Schemas

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator


class UpdatePracticeRequest(BaseModel):
    """Request schema for replacing the practice settings. Contact fields are all required."""
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip_code: str = Field(..., min_length=1, max_length=20)
    phone: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    website: Optional[str] = Field(None, max_length=200)
    tax_id: Optional[str] = Field(None, max_length=30)
    npi: Optional[str] = Field(None, max_length=20)

    @field_validator("name", "address", "city", "state", "zip_code", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class PracticeResponse(BaseModel):
    """Response schema for practice settings."""
    id: str
    name: str
    address: str
    city: str
    state: str
    zip_code: str
    phone: str
    email: str
    website: Optional[str] = None
    tax_id: Optional[str] = None
    npi: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LogoResponse(BaseModel):
    logo_url: str
