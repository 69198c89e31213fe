# Wellness Visits Feature - Models

from typing import Dict, List, Optional
from datetime import datetime
from enum import Enum
from beanie import Document, Indexed
from pydantic import BaseModel, Field
from wellness.features.visits.answers import Answer
from wellness.shared.models import TimestampMixin


class VisitStatus(str, Enum):
    """Lifecycle status of a visit."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class RecommendationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationSource(BaseModel):
    """Question (and answer) that prompted a recommendation."""
    question: str
    response: Optional[str] = None


class Recommendation(BaseModel):
    domain: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1, max_length=2000)
    priority: RecommendationPriority = RecommendationPriority.MEDIUM
    source: Optional[RecommendationSource] = None


class HealthPlan(BaseModel):
    """Recommendations given to the patient at the end of a visit."""
    recommendations: List[Recommendation] = Field(default_factory=list)
    summary: Optional[str] = Field(None, max_length=5000)


class Visit(Document, TimestampMixin):
    """
    Visit document model.

    A scheduled wellness assessment for one patient, optionally with an
    assigned provider and a template whose questions are answered in
    ``responses``.
    """

    patient_id: Indexed(str)  # References Patient._id
    provider_id: Optional[str] = None  # References User._id
    template_id: Optional[str] = None  # References Template._id

    scheduled_date: datetime
    status: VisitStatus = VisitStatus.SCHEDULED
    visit_type: str = "check-up"
    location: Optional[str] = None
    notes: Optional[str] = None

    # Assessment progress: question id -> answer, and indices of finished sections
    responses: Dict[str, Answer] = Field(default_factory=dict)
    completed_sections: List[int] = Field(default_factory=list)
    completed_at: Optional[datetime] = None

    health_plan: Optional[HealthPlan] = None

    class Settings:
        name = "visits"
        use_state_management = True
        indexes = [
            [("patient_id", 1), ("scheduled_date", -1)],
            [("provider_id", 1), ("scheduled_date", -1)],
            [("status", 1), ("scheduled_date", 1)],
            "scheduled_date",
            "template_id",
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "patient_id": "665f1c2e9b1e8a0012345678",
                "provider_id": "665f1c2e9b1e8a0087654321",
                "template_id": "665f1c2e9b1e8a00abcdef01",
                "scheduled_date": "2025-01-01T10:00:00Z",
                "status": "in-progress",
                "responses": {"q1": {"type": "text", "value": "yes"}},
                "completed_sections": [0],
            }
        }
