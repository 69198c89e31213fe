"""
Section and question identifier handling for templates.

Identifiers are handed out once, when a section or question is first
saved. Updates must name existing identifiers so answers stored on visits
keep pointing at the same question.
"""

from typing import Iterable, List, Optional, Set

from wellness.features.templates.models import Question, Section
from wellness.features.templates.schemas import QuestionDefinition, SectionDefinition
from wellness.shared.exceptions import BadRequestException
from wellness.shared.identifiers import new_identifier


def _fresh(pool: Set[str]) -> str:
    identifier = new_identifier()
    while identifier in pool:
        identifier = new_identifier()
    pool.add(identifier)
    return identifier


def _supplied_ids(definitions: List[SectionDefinition]) -> List[str]:
    ids = []
    for section in definitions:
        if section.id:
            ids.append(section.id)
        ids.extend(q.id for q in section.questions if q.id)
    return ids


def _question(definition: QuestionDefinition, identifier: str) -> Question:
    return Question(
        id=identifier,
        text=definition.text,
        type=definition.type,
        required=definition.required,
        options=definition.options,
        conditional_logic=definition.conditional_logic,
    )


def _section(definition: SectionDefinition, identifier: str, questions: List[Question]) -> Section:
    return Section(
        id=identifier,
        title=definition.title,
        description=definition.description,
        questions=questions,
    )


def assign_identifiers(
    definitions: Iterable[SectionDefinition],
    taken: Optional[Iterable[str]] = None,
) -> List[Section]:
    """
    Build stored sections for new definitions.

    Client-supplied identifiers are kept when unique across the template
    (``taken`` lists identifiers already in use); missing ones get a fresh
    identifier.
    """
    definitions = list(definitions)
    used = set(taken or ())

    reserved: Set[str] = set()
    for identifier in _supplied_ids(definitions):
        if identifier in used or identifier in reserved:
            raise BadRequestException(f"Duplicate id '{identifier}' in template")
        reserved.add(identifier)

    # Generated ids must avoid both existing and supplied ones
    pool = used | reserved
    sections = []
    for definition in definitions:
        section_id = definition.id or _fresh(pool)
        questions = [_question(q, q.id or _fresh(pool)) for q in definition.questions]
        sections.append(_section(definition, section_id, questions))
    return sections


def reconcile_identifiers(stored: List[Section], definitions: List[SectionDefinition]) -> List[Section]:
    """
    Build the replacement section list for an update.

    Every incoming section and question must carry an identifier the stored
    template already has; anything else is rejected instead of silently
    getting a new identifier.
    """
    known_sections = {s.id for s in stored}
    known_questions = {q.id for s in stored for q in s.questions}

    seen: Set[str] = set()
    sections = []
    for definition in definitions:
        if not definition.id:
            raise BadRequestException(
                f"Section '{definition.title}' has no id; add new sections through the sections endpoint"
            )
        if definition.id not in known_sections:
            raise BadRequestException(f"Unknown section id '{definition.id}'")
        if definition.id in seen:
            raise BadRequestException(f"Duplicate id '{definition.id}' in template")
        seen.add(definition.id)

        questions = []
        for question in definition.questions:
            if not question.id:
                raise BadRequestException(
                    f"Question '{question.text}' has no id; add new questions through the questions endpoint"
                )
            if question.id not in known_questions:
                raise BadRequestException(f"Unknown question id '{question.id}'")
            if question.id in seen:
                raise BadRequestException(f"Duplicate id '{question.id}' in template")
            seen.add(question.id)
            questions.append(_question(question, question.id))

        sections.append(_section(definition, definition.id, questions))
    return sections


def template_identifiers(sections: List[Section]) -> Set[str]:
    """Every section and question identifier in use."""
    ids = {s.id for s in sections}
    ids.update(q.id for s in sections for q in s.questions)
    return ids


def check_conditional_logic(sections: List[Section]) -> None:
    """Conditions may only depend on another question of the same template."""
    question_ids = {q.id for s in sections for q in s.questions}
    for section in sections:
        for question in section.questions:
            logic = question.conditional_logic
            if logic is None:
                continue
            if logic.depends_on == question.id:
                raise BadRequestException(f"Question '{question.id}' cannot depend on itself")
            if logic.depends_on not in question_ids:
                raise BadRequestException(
                    f"Question '{question.id}' depends on unknown question '{logic.depends_on}'"
                )
