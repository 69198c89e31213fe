"""Answer tagging, pagination and query helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from wellness.features.visits.answers import (
    BooleanAnswer,
    DateAnswer,
    MultipleChoiceAnswer,
    NumericAnswer,
    TextAnswer,
    answer_values,
    tag_answer,
    type_answers,
)
from wellness.features.visits.schemas import RecordResponsesRequest, UpdateVisitRequest
from wellness.shared.exceptions import BadRequestException, InvalidIdentifierException
from wellness.shared.identifiers import is_object_id, parse_object_id
from wellness.shared.models import TimestampMixin, utcnow
from wellness.shared.queries import date_range, text_search, to_utc
from wellness.shared.schemas import Pagination, page_count, sort_spec


def test_bare_values_are_tagged_by_json_type():
    assert tag_answer(True) == {"type": "boolean", "value": True}
    assert tag_answer(0) == {"type": "numeric", "value": 0}
    assert tag_answer(2.5) == {"type": "numeric", "value": 2.5}
    assert tag_answer(["a"]) == {"type": "multiple_choice", "value": ["a"]}
    assert tag_answer("yes") == {"type": "text", "value": "yes"}
    assert tag_answer({"type": "date", "value": "2025-01-01"}) == {"type": "date", "value": "2025-01-01"}


def test_responses_parse_into_typed_answers():
    responses = type_answers({
        "smoker": False,
        "weight": 72,
        "sports": ["run"],
        "notes": "fine",
        "last_checkup": {"type": "date", "value": "2024-06-30"},
    })

    assert isinstance(responses["smoker"], BooleanAnswer)
    assert isinstance(responses["weight"], NumericAnswer)
    assert isinstance(responses["sports"], MultipleChoiceAnswer)
    assert isinstance(responses["notes"], TextAnswer)
    assert isinstance(responses["last_checkup"], DateAnswer)
    assert responses["last_checkup"].value == date(2024, 6, 30)
    assert answer_values(responses)["weight"] == 72.0


def test_question_type_decides_bare_answers():
    responses = type_answers({"seen": "2025-03-01", "weight": "42"}, {"seen": "date", "weight": "numeric"})

    assert responses["seen"] == DateAnswer(value=date(2025, 3, 1))
    assert responses["weight"] == NumericAnswer(value=42.0)
    assert answer_values(responses) == {"seen": date(2025, 3, 1), "weight": 42.0}

    with pytest.raises(ValueError, match="'weight' is not a valid numeric answer"):
        type_answers({"weight": "heavy"}, {"weight": "numeric"})


def test_unknown_answer_type_is_rejected():
    with pytest.raises(ValidationError):
        RecordResponsesRequest(responses={"q1": {"type": "scale", "value": 3}})


def test_update_request_keeps_bare_answers_until_typed():
    request = UpdateVisitRequest(
        status="completed",
        responses={"q1": "yes", "q2": {"type": "numeric", "value": "3"}},
    )
    assert request.responses["q1"] == "yes"
    assert request.responses["q2"] == NumericAnswer(value=3)


def test_answers_must_be_json_scalars_or_tagged():
    with pytest.raises(ValidationError):
        RecordResponsesRequest(responses={"q1": None})


@pytest.mark.parametrize("total,limit,pages", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (250, 100, 3)])
def test_page_count_rounds_up(total, limit, pages):
    assert page_count(total, limit) == pages


def test_pagination_block():
    pagination = Pagination.build(total=25, page=2, limit=10)
    assert pagination.model_dump() == {"total": 25, "page": 2, "limit": 10, "pages": 3}


def test_sort_spec():
    assert sort_spec("scheduled_date", "desc") == [("scheduled_date", -1)]
    assert sort_spec("last_name", "asc") == [("last_name", 1)]


def test_text_search_escapes_regex_characters():
    query = text_search(" a.b ", ["first_name", "email"])
    assert query == {"$or": [
        {"first_name": {"$regex": r"a\.b", "$options": "i"}},
        {"email": {"$regex": r"a\.b", "$options": "i"}},
    ]}


def test_date_range_is_inclusive():
    start, end = datetime(2025, 1, 1), datetime(2025, 1, 31, 23, 59, 59)
    assert date_range("scheduled_date", start, end) == {
        "scheduled_date": {"$gte": start, "$lte": end},
    }
    assert date_range("scheduled_date", start, None) == {"scheduled_date": {"$gte": start}}
    assert date_range("scheduled_date", None, None) == {}


def test_date_range_rejects_reversed_bounds():
    with pytest.raises(BadRequestException):
        date_range("scheduled_date", datetime(2025, 2, 1), datetime(2025, 1, 1))


def test_aware_datetimes_become_naive_utc():
    aware = datetime(2025, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc(aware) == datetime(2025, 1, 1, 10, 0)
    assert to_utc(None) is None


def test_clock_is_naive_utc():
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    now = utcnow()

    assert now.tzinfo is None
    assert before <= now <= datetime.now(timezone.utc).replace(tzinfo=None)


def test_update_timestamp_moves_updated_at():
    record = TimestampMixin()
    record.updated_at = datetime(2020, 1, 1)
    record.update_timestamp()
    assert record.updated_at > datetime(2020, 1, 1)


def test_object_id_parsing():
    assert is_object_id("665f1c2e9b1e8a0012345678")
    assert not is_object_id("not-an-id")
    assert str(parse_object_id("665f1c2e9b1e8a0012345678", "visit")) == "665f1c2e9b1e8a0012345678"

    with pytest.raises(InvalidIdentifierException) as exc_info:
        parse_object_id("123", "visit")
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Invalid visit ID format"
