# Patient Records Feature - Schemas

from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from wellness.features.patients.models import Address, Gender, Insurance, MedicalHistory
from wellness.shared.identifiers import is_object_id
from wellness.shared.schemas import Pagination


def _strip(v):
    return v.strip() if isinstance(v, str) else v


def _check_provider_id(v):
    if v is not None and not is_object_id(v):
        raise ValueError("primary_care_provider_id must be a valid user ID")
    return v


# ============== Create Patient ==============

class CreatePatientRequest(BaseModel):
    """Request schema for creating a new patient."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date
    gender: Gender
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[Address] = None
    medical_record_number: Optional[str] = Field(None, max_length=50)
    primary_care_provider_id: Optional[str] = None
    insurance: Optional[Insurance] = None
    medical_history: MedicalHistory = Field(default_factory=MedicalHistory)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        return _strip(v)

    @field_validator("primary_care_provider_id")
    @classmethod
    def check_provider_id(cls, v: Optional[str]) -> Optional[str]:
        return _check_provider_id(v)

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("date_of_birth cannot be in the future")
        return v


# ============== Update Patient ==============

class UpdatePatientRequest(BaseModel):
    """Request schema for updating patient information. Omitted fields are left as stored."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[Address] = None
    medical_record_number: Optional[str] = Field(None, max_length=50)
    primary_care_provider_id: Optional[str] = None
    insurance: Optional[Insurance] = None
    medical_history: Optional[MedicalHistory] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        return _strip(v)

    @field_validator("primary_care_provider_id")
    @classmethod
    def check_provider_id(cls, v: Optional[str]) -> Optional[str]:
        return _check_provider_id(v)


# ============== Patient Response ==============

class PatientResponse(BaseModel):
    """Response schema for patient data."""
    id: str
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    medical_record_number: Optional[str] = None
    primary_care_provider_id: Optional[str] = None
    insurance: Optional[Insurance] = None
    medical_history: MedicalHistory = Field(default_factory=MedicalHistory)
    created_at: datetime
    updated_at: datetime


class PatientSummary(BaseModel):
    """Patient fields embedded in visit listings."""
    id: str
    first_name: str
    last_name: str
    date_of_birth: date


class PatientListResponse(BaseModel):
    """Response schema for a page of patients."""
    patients: List[PatientResponse]
    pagination: Pagination
