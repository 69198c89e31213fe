# Assessment Templates Feature - Models

from typing import List, Optional, Union
from enum import Enum
from beanie import Document
from pydantic import BaseModel, Field
from wellness.shared.models import TimestampMixin


class QuestionType(str, Enum):
    """Answer type a question expects."""
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple_choice"
    NUMERIC = "numeric"
    DATE = "date"
    BOOLEAN = "boolean"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class Option(BaseModel):
    """One choice of a multiple-choice question."""
    value: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)


class ConditionalLogic(BaseModel):
    """Show a question only when another question's answer matches."""
    depends_on: str
    operator: ConditionOperator = ConditionOperator.EQUALS
    value: Union[bool, float, str]


class Question(BaseModel):
    id: str
    text: str
    type: QuestionType
    required: bool = False
    options: List[Option] = Field(default_factory=list)
    conditional_logic: Optional[ConditionalLogic] = None


class Section(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)


class Template(Document, TimestampMixin):
    """
    Assessment template document model.

    Sections and questions keep the identifier they were given when first
    saved; visits store answers keyed by question identifier.
    """

    name: str
    description: Optional[str] = None
    sections: List[Section] = Field(default_factory=list)
    is_active: bool = True
    version: int = 1
    created_by: Optional[str] = None  # References User._id

    class Settings:
        name = "templates"
        use_state_management = True
        indexes = [
            "name",
            "is_active",
            [("updated_at", -1)],
        ]

    def find_section(self, section_id: str) -> Optional[Section]:
        return next((s for s in self.sections if s.id == section_id), None)
