"""Identifier assignment and validation for template sections and questions."""

import pytest
from pydantic import ValidationError

from wellness.features.templates.models import ConditionalLogic, Question, QuestionType, Section
from wellness.features.templates.schemas import (
    CreateTemplateRequest,
    QuestionDefinition,
    SectionDefinition,
)
from wellness.features.templates.structure import (
    assign_identifiers,
    check_conditional_logic,
    reconcile_identifiers,
    template_identifiers,
)
from wellness.shared.exceptions import BadRequestException


def question(text="How are you?", type=QuestionType.TEXT, id=None, **kwargs):
    return QuestionDefinition(id=id, text=text, type=type, **kwargs)


def stored_template():
    return [
        Section(id="s1", title="General", questions=[
            Question(id="q1", text="Smoker?", type=QuestionType.BOOLEAN),
            Question(id="q2", text="Packs per day", type=QuestionType.NUMERIC),
        ]),
        Section(id="s2", title="Notes", questions=[
            Question(id="q3", text="Anything else?", type=QuestionType.TEXT),
        ]),
    ]


def test_missing_identifiers_are_generated_and_unique():
    sections = assign_identifiers([
        SectionDefinition(title="A", questions=[question(), question("Second")]),
        SectionDefinition(title="B", questions=[question("Third")]),
    ])

    ids = template_identifiers(sections)
    assert len(ids) == 5
    assert all(ids)


def test_supplied_identifiers_are_kept():
    [section] = assign_identifiers([
        SectionDefinition(id="vitals", title="Vitals", questions=[question(id="bp"), question("Other")]),
    ])

    assert section.id == "vitals"
    assert section.questions[0].id == "bp"
    assert section.questions[1].id not in {"vitals", "bp"}


def test_duplicate_supplied_identifiers_are_rejected():
    with pytest.raises(BadRequestException) as exc_info:
        assign_identifiers([
            SectionDefinition(id="a", title="A", questions=[question(id="a")]),
        ])
    assert exc_info.value.status_code == 400


def test_new_section_cannot_reuse_an_existing_identifier():
    with pytest.raises(BadRequestException):
        assign_identifiers([SectionDefinition(id="q1", title="New")], taken={"s1", "q1"})


def test_update_keeps_existing_identifiers_and_allows_removal():
    sections = reconcile_identifiers(stored_template(), [
        SectionDefinition(id="s1", title="General health", questions=[
            question("Do you smoke?", type=QuestionType.BOOLEAN, id="q1"),
        ]),
    ])

    assert [s.id for s in sections] == ["s1"]
    assert sections[0].title == "General health"
    assert [q.id for q in sections[0].questions] == ["q1"]
    assert sections[0].questions[0].text == "Do you smoke?"


@pytest.mark.parametrize("definitions", [
    [SectionDefinition(title="No id")],
    [SectionDefinition(id="s9", title="Unknown")],
    [SectionDefinition(id="s1", title="General", questions=[question()])],
    [SectionDefinition(id="s1", title="General", questions=[question(id="q99")])],
    [SectionDefinition(id="s1", title="A"), SectionDefinition(id="s1", title="B")],
])
def test_update_rejects_missing_unknown_or_repeated_identifiers(definitions):
    with pytest.raises(BadRequestException):
        reconcile_identifiers(stored_template(), definitions)


def test_conditional_logic_must_point_at_another_question():
    sections = stored_template()
    sections[0].questions[1].conditional_logic = ConditionalLogic(depends_on="q1", value=True)
    check_conditional_logic(sections)

    sections[0].questions[1].conditional_logic = ConditionalLogic(depends_on="missing", value=True)
    with pytest.raises(BadRequestException):
        check_conditional_logic(sections)

    sections[0].questions[1].conditional_logic = ConditionalLogic(depends_on="q2", value=True)
    with pytest.raises(BadRequestException):
        check_conditional_logic(sections)


def test_multiple_choice_needs_distinct_options():
    with pytest.raises(ValidationError):
        question(type=QuestionType.MULTIPLE_CHOICE)

    with pytest.raises(ValidationError):
        question(type=QuestionType.MULTIPLE_CHOICE, options=[
            {"value": "a", "label": "A"},
            {"value": "a", "label": "Also A"},
        ])

    with pytest.raises(ValidationError):
        question(type=QuestionType.TEXT, options=[{"value": "a", "label": "A"}])


def test_template_name_must_not_be_blank():
    with pytest.raises(ValidationError):
        CreateTemplateRequest(name="   ", sections=[])

    assert CreateTemplateRequest(name=" Annual ", sections=[]).name == "Annual"
