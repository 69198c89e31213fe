"""Template service rules, run against a stand-in stored template."""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from bson import ObjectId

from wellness.features.templates.models import Question, QuestionType, Section, Template
from wellness.features.templates.schemas import (
    QuestionDefinition,
    SectionDefinition,
    UpdateTemplateRequest,
)
from wellness.features.templates.service import TemplateService
from wellness.shared.exceptions import NotFoundException

from tests.conftest import API


TEMPLATE_ID = "665f1c2e9b1e8a00bbbbbbbb"


def stored_template(**overrides):
    now = datetime(2025, 1, 1, 9, 0)
    fields = dict(
        id=ObjectId(TEMPLATE_ID),
        name="Annual wellness",
        description=None,
        sections=[
            Section(id="s1", title="General", questions=[
                Question(id="q1", text="Smoker?", type=QuestionType.BOOLEAN),
                Question(id="q2", text="Packs per day", type=QuestionType.NUMERIC),
            ]),
            Section(id="s2", title="Notes", questions=[
                Question(id="q3", text="Anything else?", type=QuestionType.TEXT),
            ]),
        ],
        is_active=True,
        version=3,
        created_by=None,
        created_at=now,
        updated_at=now,
        save=AsyncMock(),
        delete=AsyncMock(),
    )
    fields.update(overrides)
    template = SimpleNamespace(**fields)
    template.update_timestamp = lambda: None
    template.find_section = lambda section_id: Template.find_section(template, section_id)
    return template


@pytest.fixture
def template():
    """Patch the database read so TemplateService works on a stand-in template."""
    stored = stored_template()
    with patch.object(Template, "get", AsyncMock(return_value=stored)):
        yield stored


async def test_update_bumps_version(template):
    result = await TemplateService.update_template(
        ObjectId(TEMPLATE_ID),
        UpdateTemplateRequest(name="Annual wellness v2", is_active=False),
    )

    assert result.version == 4
    assert result.name == "Annual wellness v2"
    assert result.is_active is False
    assert [s.id for s in result.sections] == ["s1", "s2"]
    template.save.assert_awaited_once()


async def test_update_replaces_sections_keeping_ids(template):
    result = await TemplateService.update_template(
        ObjectId(TEMPLATE_ID),
        UpdateTemplateRequest(sections=[
            SectionDefinition(id="s2", title="Notes", questions=[
                QuestionDefinition(id="q3", text="Anything else to add?", type=QuestionType.TEXT),
            ]),
        ]),
    )

    assert [s.id for s in result.sections] == ["s2"]
    assert result.sections[0].questions[0].text == "Anything else to add?"
    assert result.version == 4


def test_put_with_unknown_question_id_is_rejected(client, staff, template):
    response = client.put(f"{API}/templates/{TEMPLATE_ID}", json={
        "sections": [{
            "id": "s1",
            "title": "General",
            "questions": [{"id": "q9", "text": "New?", "type": "boolean"}],
        }],
    })

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Unknown question id 'q9'"
    assert template.version == 3
    template.save.assert_not_awaited()


async def test_add_section_assigns_fresh_ids(template):
    result = await TemplateService.add_section(
        ObjectId(TEMPLATE_ID),
        SectionDefinition(title="Sleep", questions=[
            QuestionDefinition(text="Hours per night", type=QuestionType.NUMERIC),
        ]),
    )

    assert result.version == 4
    added = result.sections[-1]
    assert added.title == "Sleep"
    assert added.id not in {"s1", "s2", "q1", "q2", "q3"}
    assert added.questions[0].id not in {"s1", "s2", "q1", "q2", "q3", added.id}
    template.save.assert_awaited_once()


async def test_new_question_id_skips_ids_in_use(template):
    generated = iter(["q1", "scratch", "q3", "s2", "sleep-hours"])
    with patch("wellness.features.templates.structure.new_identifier", side_effect=lambda: next(generated)):
        result = await TemplateService.add_question(
            ObjectId(TEMPLATE_ID),
            "s2",
            QuestionDefinition(text="Hours of sleep", type=QuestionType.NUMERIC),
        )

    questions = result.sections[1].questions
    assert [q.id for q in questions] == ["q3", "sleep-hours"]
    assert result.version == 4


def test_add_question_to_unknown_section(client, staff, template):
    response = client.post(
        f"{API}/templates/{TEMPLATE_ID}/sections/s9/questions",
        json={"text": "New?", "type": "boolean"},
    )

    assert response.status_code == 404
    assert response.json() == {"ok": False, "error": {"code": 404, "message": "Section not found"}}
    template.save.assert_not_awaited()


def test_delete_template(client, staff, template):
    response = client.delete(f"{API}/templates/{TEMPLATE_ID}")

    assert response.status_code == 200
    assert response.json()["value"] == {"message": "Template deleted successfully"}
    template.delete.assert_awaited_once()


async def test_missing_template_is_not_found():
    with patch.object(Template, "get", AsyncMock(return_value=None)):
        with pytest.raises(NotFoundException) as exc_info:
            await TemplateService.delete_template(ObjectId(TEMPLATE_ID))

    assert exc_info.value.detail == "Template not found"
