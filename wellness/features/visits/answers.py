"""Typed answers recorded against template questions."""

from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


class TextAnswer(BaseModel):
    type: Literal["text"] = "text"
    value: str


class MultipleChoiceAnswer(BaseModel):
    type: Literal["multiple_choice"] = "multiple_choice"
    value: Union[str, List[str]]

    def selected(self) -> List[str]:
        return [self.value] if isinstance(self.value, str) else list(self.value)


class NumericAnswer(BaseModel):
    type: Literal["numeric"] = "numeric"
    value: float


class DateAnswer(BaseModel):
    type: Literal["date"] = "date"
    value: date


class BooleanAnswer(BaseModel):
    type: Literal["boolean"] = "boolean"
    value: bool


Answer = Annotated[
    Union[TextAnswer, MultipleChoiceAnswer, NumericAnswer, DateAnswer, BooleanAnswer],
    Field(discriminator="type"),
]

answer_adapter: TypeAdapter = TypeAdapter(Answer)


def json_type(value: Any) -> Optional[str]:
    """Answer type implied by a bare JSON value; bools are checked before numbers."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "numeric"
    if isinstance(value, list):
        return "multiple_choice"
    if isinstance(value, str):
        return "text"
    return None


def tag_answer(value: Any, question_type: Optional[str] = None) -> Any:
    """
    Expand a bare value into a tagged answer.

    The question's type wins when it is known, so ``"2025-03-01"`` answers
    a date question. Otherwise the JSON type decides. Already tagged answers
    pass through untouched.
    """
    if isinstance(value, (dict, BaseModel)):
        return value
    kind = question_type or json_type(value)
    if kind is None:
        return value
    return {"type": kind, "value": value}


def check_raw_answers(responses: Dict[str, Any]) -> Dict[str, Any]:
    """
    Request-time check of an answer mapping.

    Tagged answers are parsed straight away. Bare values are kept as sent
    until the visit's template says which type they answer.
    """
    checked: Dict[str, Any] = {}
    for question_id, value in responses.items():
        if isinstance(value, dict):
            try:
                checked[question_id] = answer_adapter.validate_python(value)
            except ValidationError as e:
                raise ValueError(f"'{question_id}': {e.errors()[0]['msg']}")
        elif json_type(value) is None:
            raise ValueError(f"'{question_id}' must be a string, number, boolean, list or tagged answer")
        else:
            checked[question_id] = value
    return checked


def type_answers(responses: Mapping[str, Any], question_types: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Typed answers for a mapping of bare and tagged values.

    ``question_types`` maps question id to question type. Raises ValueError
    naming the first answer whose value does not fit its type.
    """
    question_types = question_types or {}
    typed: Dict[str, Any] = {}
    for question_id, value in responses.items():
        if isinstance(value, BaseModel):
            typed[question_id] = value
            continue
        kind = question_types.get(question_id) or json_type(value) or "answer"
        try:
            typed[question_id] = answer_adapter.validate_python(tag_answer(value, question_types.get(question_id)))
        except ValidationError:
            raise ValueError(f"'{question_id}' is not a valid {kind} answer")
    return typed


def answer_values(responses: Mapping[str, Any]) -> Dict[str, Any]:
    """Plain question id -> value mapping, the form answers take on the wire."""
    return {
        question_id: answer.value if isinstance(answer, BaseModel) else answer
        for question_id, answer in responses.items()
    }
