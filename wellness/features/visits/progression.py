"""
Visit status machine and assessment response checks.

Functions here work on any object with the Visit attributes, so the
rules can be exercised without a database.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional

from wellness.features.templates.models import ConditionOperator, Question, QuestionType, Template
from wellness.features.visits.answers import MultipleChoiceAnswer, type_answers
from wellness.features.visits.models import VisitStatus
from wellness.shared.exceptions import BadRequestException, InvalidTransitionException
from wellness.shared.models import utcnow


TERMINAL: FrozenSet[VisitStatus] = frozenset({
    VisitStatus.COMPLETED,
    VisitStatus.CANCELLED,
    VisitStatus.NO_SHOW,
})

TRANSITIONS: Dict[VisitStatus, FrozenSet[VisitStatus]] = {
    VisitStatus.SCHEDULED: frozenset({
        VisitStatus.IN_PROGRESS,
        VisitStatus.COMPLETED,
        VisitStatus.CANCELLED,
        VisitStatus.NO_SHOW,
    }),
    VisitStatus.IN_PROGRESS: frozenset({
        VisitStatus.COMPLETED,
        VisitStatus.CANCELLED,
        VisitStatus.NO_SHOW,
    }),
    VisitStatus.COMPLETED: frozenset(),
    VisitStatus.CANCELLED: frozenset(),
    VisitStatus.NO_SHOW: frozenset(),
}


def can_transition(current: VisitStatus, requested: VisitStatus) -> bool:
    """Re-sending the current status is always allowed."""
    current, requested = VisitStatus(current), VisitStatus(requested)
    return current == requested or requested in TRANSITIONS[current]


def transition(visit, requested: VisitStatus) -> bool:
    """
    Move ``visit`` to ``requested``.

    Returns True when the status changed. Raises InvalidTransitionException
    for moves the status machine does not allow.
    """
    current, requested = VisitStatus(visit.status), VisitStatus(requested)
    if current == requested:
        return False
    if requested not in TRANSITIONS[current]:
        raise InvalidTransitionException(current.value, requested.value)

    visit.status = requested
    if requested == VisitStatus.COMPLETED:
        visit.completed_at = utcnow()
    return True


def normalise_sections(indices: Iterable[int], section_count: Optional[int] = None) -> List[int]:
    """Sorted, de-duplicated section indices, bounded by the template when known."""
    result = sorted(set(indices))
    if result and result[0] < 0:
        raise BadRequestException("Completed section indices must not be negative")
    if section_count is not None and result and result[-1] >= section_count:
        raise BadRequestException(
            f"Completed section index {result[-1]} is out of range (template has {section_count} sections)"
        )
    return result


def _condition_met(question: Question, responses: Dict) -> bool:
    logic = question.conditional_logic
    if logic is None:
        return True

    answer = responses.get(logic.depends_on)
    if answer is None:
        return False

    if isinstance(answer, MultipleChoiceAnswer):
        actual = answer.selected()
        matches = str(logic.value) in actual
    else:
        actual = answer.value
        matches = actual == logic.value

    if logic.operator == ConditionOperator.EQUALS:
        return matches
    if logic.operator == ConditionOperator.NOT_EQUALS:
        return not matches

    try:
        if logic.operator == ConditionOperator.GREATER_THAN:
            return actual > logic.value
        return actual < logic.value
    except TypeError:
        return False


def validate_responses(template: Template, responses: Dict, require_complete: bool = False) -> None:
    """
    Check answers against the template's questions.

    Every answered question must exist with a matching type, and chosen
    options must be declared. With ``require_complete`` every required
    question whose condition is met must be answered.
    """
    questions = {q.id: q for section in template.sections for q in section.questions}
    problems = []

    for question_id, answer in responses.items():
        question = questions.get(question_id)
        if question is None:
            problems.append(f"'{question_id}' is not a question of this template")
            continue
        if answer.type != question.type.value:
            problems.append(f"'{question_id}' expects a {question.type.value} answer, got {answer.type}")
            continue
        if question.type == QuestionType.MULTIPLE_CHOICE:
            allowed = {o.value for o in question.options}
            unknown = [v for v in answer.selected() if v not in allowed]
            if unknown:
                problems.append(f"'{question_id}' has no option(s) {', '.join(unknown)}")

    if require_complete:
        for question in questions.values():
            if question.required and question.id not in responses and _condition_met(question, responses):
                problems.append(f"Required question '{question.id}' is unanswered")

    if problems:
        raise BadRequestException("Invalid responses: " + "; ".join(problems))


def parse_responses(responses: Dict, template: Optional[Template] = None) -> Dict:
    """
    Typed answers for a mix of bare and tagged values.

    Bare values take the type of the template question they answer; without
    a template they are typed by their JSON type.
    """
    question_types = None
    if template:
        question_types = {q.id: q.type.value for section in template.sections for q in section.questions}
    try:
        return type_answers(responses, question_types)
    except ValueError as e:
        raise BadRequestException(f"Invalid responses: {e}")


def apply_responses(visit, responses: Dict, completed_sections: Iterable[int], template: Optional[Template] = None,
                    require_complete: bool = False) -> None:
    """Replace the stored answers and completed sections; last write wins."""
    section_count = len(template.sections) if template else None
    sections = normalise_sections(completed_sections, section_count)
    answers = parse_responses(responses, template)
    if template:
        validate_responses(template, answers, require_complete=require_complete)

    visit.responses = answers
    visit.completed_sections = sections


def record_responses(visit, responses: Dict, completed_sections: Iterable[int], template: Optional[Template] = None) -> None:
    """Save progress on an assessment and mark the visit in progress."""
    if VisitStatus(visit.status) in TERMINAL:
        raise InvalidTransitionException(VisitStatus(visit.status).value, VisitStatus.IN_PROGRESS.value)
    apply_responses(visit, responses, completed_sections, template)
    transition(visit, VisitStatus.IN_PROGRESS)


def complete(visit, responses: Dict, completed_sections: Iterable[int], template: Optional[Template] = None) -> None:
    """Save the final answers and mark the visit completed."""
    if not can_transition(visit.status, VisitStatus.COMPLETED):
        raise InvalidTransitionException(VisitStatus(visit.status).value, VisitStatus.COMPLETED.value)
    apply_responses(visit, responses, completed_sections, template, require_complete=True)
    transition(visit, VisitStatus.COMPLETED)
