# Assessment Templates Feature - Schemas

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator

from wellness.features.templates.models import (
    ConditionalLogic,
    Option,
    QuestionType,
    Section,
)
from wellness.shared.schemas import Pagination


# ============== Definition input ==============

class QuestionDefinition(BaseModel):
    """Question as sent by clients; ``id`` is absent for new questions."""
    id: Optional[str] = Field(None, min_length=1)
    text: str = Field(..., min_length=1)
    type: QuestionType
    required: bool = False
    options: List[Option] = Field(default_factory=list)
    conditional_logic: Optional[ConditionalLogic] = None

    @model_validator(mode="after")
    def check_options(self) -> "QuestionDefinition":
        if self.type == QuestionType.MULTIPLE_CHOICE:
            if not self.options:
                raise ValueError(f"Multiple choice question '{self.text}' needs at least one option")
            values = [o.value for o in self.options]
            if len(values) != len(set(values)):
                raise ValueError(f"Question '{self.text}' has duplicate option values")
        elif self.options:
            raise ValueError(f"Only multiple choice questions take options ('{self.text}' is {self.type.value})")
        return self


class SectionDefinition(BaseModel):
    """Section as sent by clients; ``id`` is absent for new sections."""
    id: Optional[str] = Field(None, min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    questions: List[QuestionDefinition] = Field(default_factory=list)


# ============== Create / Update Template ==============

class CreateTemplateRequest(BaseModel):
    """Request schema for creating a template."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    sections: List[SectionDefinition]
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UpdateTemplateRequest(BaseModel):
    """
    Request schema for updating a template.

    Every section and question in ``sections`` must carry an identifier the
    template already has. New sections and questions are added through their
    own endpoints.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    sections: Optional[List[SectionDefinition]] = None
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


# ============== Responses ==============

class TemplateResponse(BaseModel):
    """Response schema for template data."""
    id: str
    name: str
    description: Optional[str] = None
    sections: List[Section]
    is_active: bool
    version: int
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TemplateListResponse(BaseModel):
    """Response schema for a page of templates."""
    templates: List[TemplateResponse]
    pagination: Pagination
