# Patient Records Feature - Models

from typing import Optional, List
from datetime import date
from enum import Enum
from beanie import Document
from pymongo import IndexModel
from pydantic import BaseModel, EmailStr, Field
from wellness.shared.models import TimestampMixin


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Address(BaseModel):
    """Postal address."""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class Insurance(BaseModel):
    """Insurance coverage details."""
    provider: Optional[str] = None
    policy_number: Optional[str] = None
    group_number: Optional[str] = None


class MedicalHistory(BaseModel):
    """Self-reported medical history."""
    conditions: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    surgeries: List[str] = Field(default_factory=list)


class Patient(Document, TimestampMixin):
    """Patient document model. Patients belong to the practice, not to a user."""

    # Personal information
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[Address] = None

    # Practice records
    medical_record_number: Optional[str] = None
    primary_care_provider_id: Optional[str] = None  # References User._id
    insurance: Optional[Insurance] = None
    medical_history: MedicalHistory = Field(default_factory=MedicalHistory)

    class Settings:
        name = "patients"
        use_state_management = True
        indexes = [
            [("last_name", 1), ("first_name", 1)],
            "date_of_birth",
            IndexModel(
                [("medical_record_number", 1)],
                unique=True,
                partialFilterExpression={"medical_record_number": {"$type": "string"}},
            ),
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Sarah",
                "last_name": "Johnson",
                "date_of_birth": "1950-05-15",
                "gender": "female",
                "email": "sarah.johnson@email.com",
                "phone": "+1 (555) 010-2030",
                "address": {"street": "12 Elm St", "city": "Springfield", "state": "IL", "zip_code": "62701"},
                "insurance": {"provider": "Medicare", "policy_number": "1EG4-TE5-MK72"},
                "medical_history": {"conditions": ["Hypertension"], "allergies": ["Penicillin"]},
            }
        }
