# Wellness Visits Feature - Schemas

from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from wellness.features.patients.schemas import PatientSummary
from wellness.features.visits.answers import check_raw_answers
from wellness.features.visits.models import HealthPlan, VisitStatus
from wellness.shared.identifiers import is_object_id
from wellness.shared.schemas import Pagination


def _check_reference(v: Optional[str], name: str) -> Optional[str]:
    if v is not None and not is_object_id(v):
        raise ValueError(f"{name} must be a valid ID")
    return v


# ============== Create Visit ==============

class CreateVisitRequest(BaseModel):
    """Request schema for scheduling a visit."""
    patient_id: str
    scheduled_date: datetime
    provider_id: Optional[str] = None
    template_id: Optional[str] = None
    visit_type: str = Field("check-up", min_length=1, max_length=50)
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("patient_id")
    @classmethod
    def check_patient_id(cls, v: str) -> str:
        return _check_reference(v, "patient_id")

    @field_validator("provider_id")
    @classmethod
    def check_provider_id(cls, v: Optional[str]) -> Optional[str]:
        return _check_reference(v, "provider_id")

    @field_validator("template_id")
    @classmethod
    def check_template_id(cls, v: Optional[str]) -> Optional[str]:
        return _check_reference(v, "template_id")


# ============== Update Visit ==============

class UpdateVisitRequest(BaseModel):
    """
    Request schema for updating a visit.

    Omitted fields are left as stored. ``status`` moves through the visit
    lifecycle; ``responses`` and ``completed_sections`` replace the stored
    values when sent. ``health_plan`` replaces the stored plan; send null to
    clear it.
    """
    provider_id: Optional[str] = None
    template_id: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    status: Optional[VisitStatus] = None
    visit_type: Optional[str] = Field(None, min_length=1, max_length=50)
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=5000)
    responses: Optional[Dict[str, Any]] = None
    completed_sections: Optional[List[int]] = None
    health_plan: Optional[HealthPlan] = None

    @field_validator("responses")
    @classmethod
    def check_answers(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        return check_raw_answers(v) if v is not None else v

    @field_validator("provider_id")
    @classmethod
    def check_provider_id(cls, v: Optional[str]) -> Optional[str]:
        return _check_reference(v, "provider_id")

    @field_validator("template_id")
    @classmethod
    def check_template_id(cls, v: Optional[str]) -> Optional[str]:
        return _check_reference(v, "template_id")


# ============== Responses ==============

class RecordResponsesRequest(BaseModel):
    """
    Assessment answers keyed by question id, plus finished section indices.

    Answers may be bare values (typed by the question they answer) or
    tagged ``{type, value}`` objects.
    """
    responses: Dict[str, Any] = Field(default_factory=dict)
    completed_sections: List[int] = Field(default_factory=list)

    @field_validator("responses")
    @classmethod
    def check_answers(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return check_raw_answers(v)


# ============== Visit Response ==============

class ProviderSummary(BaseModel):
    """Provider fields embedded in visit data."""
    id: str
    name: str
    email: str
    title: Optional[str] = None
    specialty: Optional[str] = None


class VisitResponse(BaseModel):
    """Response schema for visit data."""
    id: str
    patient_id: str
    provider_id: Optional[str] = None
    template_id: Optional[str] = None
    scheduled_date: datetime
    status: VisitStatus
    visit_type: str
    location: Optional[str] = None
    notes: Optional[str] = None
    responses: Dict[str, Any] = Field(default_factory=dict)  # question id -> answer value
    completed_sections: List[int] = Field(default_factory=list)
    completed_at: Optional[datetime] = None
    health_plan: Optional[HealthPlan] = None
    patient: Optional[PatientSummary] = None
    provider: Optional[ProviderSummary] = None
    created_at: datetime
    updated_at: datetime


class VisitListResponse(BaseModel):
    """Response schema for a page of visits."""
    visits: List[VisitResponse]
    pagination: Pagination
