# Wellness Visits Feature - Service

from typing import Dict, Iterable, List, Optional, Tuple
from datetime import datetime
from beanie import PydanticObjectId
from beanie.operators import In

from wellness.features.auth.models import User
from wellness.features.patients.models import Patient
from wellness.features.patients.schemas import PatientSummary
from wellness.features.templates.models import Template
from wellness.features.visits import progression
from wellness.features.visits.answers import answer_values
from wellness.features.visits.models import Visit, VisitStatus
from wellness.features.visits.schemas import (
    CreateVisitRequest,
    UpdateVisitRequest,
    RecordResponsesRequest,
    ProviderSummary,
    VisitResponse,
)
from wellness.shared.exceptions import BadRequestException, InvalidTransitionException, NotFoundException
from wellness.shared.queries import date_range, to_utc
from wellness.shared.schemas import SortOrder, sort_spec
from wellness.core.logging import logger


def _object_ids(values: Iterable[Optional[str]]) -> List[PydanticObjectId]:
    return list({PydanticObjectId(v) for v in values if v and PydanticObjectId.is_valid(v)})


class VisitService:
    """Service class for wellness visit operations."""

    @staticmethod
    def visit_to_response(
        visit: Visit,
        patient: Optional[Patient] = None,
        provider: Optional[User] = None,
    ) -> VisitResponse:
        """Convert Visit model to response schema, embedding patient and provider when loaded."""
        return VisitResponse(
            id=str(visit.id),
            patient_id=visit.patient_id,
            provider_id=visit.provider_id,
            template_id=visit.template_id,
            scheduled_date=visit.scheduled_date,
            status=visit.status,
            visit_type=visit.visit_type,
            location=visit.location,
            notes=visit.notes,
            responses=answer_values(visit.responses),
            completed_sections=visit.completed_sections,
            completed_at=visit.completed_at,
            health_plan=visit.health_plan,
            patient=PatientSummary(
                id=str(patient.id),
                first_name=patient.first_name,
                last_name=patient.last_name,
                date_of_birth=patient.date_of_birth,
            ) if patient else None,
            provider=ProviderSummary(
                id=str(provider.id),
                name=provider.name,
                email=provider.email,
                title=provider.title,
                specialty=provider.specialty,
            ) if provider else None,
            created_at=visit.created_at,
            updated_at=visit.updated_at,
        )

    @staticmethod
    async def _with_people(visits: List[Visit]) -> List[VisitResponse]:
        """Load the referenced patients and providers in two queries."""
        patient_ids = _object_ids(v.patient_id for v in visits)
        provider_ids = _object_ids(v.provider_id for v in visits)

        patients: Dict[str, Patient] = {}
        if patient_ids:
            for patient in await Patient.find(In(Patient.id, patient_ids)).to_list():
                patients[str(patient.id)] = patient

        providers: Dict[str, User] = {}
        if provider_ids:
            for user in await User.find(In(User.id, provider_ids)).to_list():
                providers[str(user.id)] = user

        return [
            VisitService.visit_to_response(
                v,
                patient=patients.get(v.patient_id),
                provider=providers.get(v.provider_id) if v.provider_id else None,
            )
            for v in visits
        ]

    @staticmethod
    async def _response(visit: Visit) -> VisitResponse:
        [response] = await VisitService._with_people([visit])
        return response

    @staticmethod
    async def list_visits(
        skip: int,
        limit: int,
        patient_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[VisitStatus] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        sort_field: str = "scheduled_date",
        sort_order: SortOrder = "desc",
    ) -> Tuple[List[VisitResponse], int]:
        """
        Get a page of visits.

        Args:
            skip: Records to skip
            limit: Page size
            patient_id: Only visits for this patient
            provider_id: Only visits assigned to this provider
            status: Only visits in this status
            from_date: Inclusive lower bound on scheduled_date
            to_date: Inclusive upper bound on scheduled_date
            sort_field: Field to order by
            sort_order: "asc" or "desc"

        Returns:
            Tuple of (visits, total matching count)
        """
        filters = date_range("scheduled_date", from_date, to_date)
        if patient_id:
            filters["patient_id"] = patient_id
        if provider_id:
            filters["provider_id"] = provider_id
        if status:
            filters["status"] = VisitStatus(status).value

        query = Visit.find(filters)
        total = await query.count()
        visits = await query.sort(sort_spec(sort_field, sort_order)).skip(skip).limit(limit).to_list()

        return await VisitService._with_people(visits), total

    @staticmethod
    async def get_visit(visit_id: PydanticObjectId) -> Visit:
        visit = await Visit.get(visit_id)
        if not visit:
            raise NotFoundException("Visit not found")
        return visit

    @staticmethod
    async def get_visit_response(visit_id: PydanticObjectId) -> VisitResponse:
        return await VisitService._response(await VisitService.get_visit(visit_id))

    @staticmethod
    async def _load_template(template_id: Optional[str]) -> Optional[Template]:
        """Template used to check answers; a deleted template means answers go unchecked."""
        if not template_id:
            return None
        template = await Template.get(PydanticObjectId(template_id))
        if template is None:
            logger.warning(f"Template {template_id} no longer exists; storing responses unchecked")
        return template

    @staticmethod
    async def _check_references(provider_id: Optional[str], template_id: Optional[str]) -> None:
        if provider_id and await User.get(PydanticObjectId(provider_id)) is None:
            raise BadRequestException("Provider not found")
        if template_id and await Template.get(PydanticObjectId(template_id)) is None:
            raise BadRequestException("Template not found")

    @staticmethod
    async def create_visit(request: CreateVisitRequest) -> VisitResponse:
        """
        Schedule a visit.

        The patient must exist; provider and template, when given, must too.
        """
        if await Patient.get(PydanticObjectId(request.patient_id)) is None:
            raise BadRequestException("Patient not found")
        await VisitService._check_references(request.provider_id, request.template_id)

        visit = Visit(
            patient_id=request.patient_id,
            provider_id=request.provider_id,
            template_id=request.template_id,
            scheduled_date=to_utc(request.scheduled_date),
            visit_type=request.visit_type,
            location=request.location,
            notes=request.notes,
        )
        await visit.insert()

        logger.info(f"Scheduled visit {visit.id} for patient {visit.patient_id} on {visit.scheduled_date}")
        return await VisitService._response(visit)

    @staticmethod
    async def update_visit(visit_id: PydanticObjectId, request: UpdateVisitRequest) -> VisitResponse:
        """
        Update a visit.

        A status change must be allowed from the current status. Sent
        responses replace the stored ones and are checked against the
        visit's template; moving to completed requires every required
        question to be answered. Stored answers are checked again when the
        template changes.
        """
        visit = await VisitService.get_visit(visit_id)
        update_dict = request.model_dump(
            exclude_unset=True,
            exclude={"status", "responses", "completed_sections", "health_plan"},
        )

        await VisitService._check_references(update_dict.get("provider_id"), update_dict.get("template_id"))
        if "scheduled_date" in update_dict:
            if update_dict["scheduled_date"] is None:
                raise BadRequestException("scheduled_date cannot be empty")
            update_dict["scheduled_date"] = to_utc(update_dict["scheduled_date"])

        previous = VisitStatus(visit.status)
        if request.status is not None and not progression.can_transition(previous, request.status):
            raise InvalidTransitionException(previous.value, VisitStatus(request.status).value)

        template_changed = "template_id" in update_dict and update_dict["template_id"] != visit.template_id
        for field, value in update_dict.items():
            setattr(visit, field, value)
        if "health_plan" in request.model_fields_set:
            visit.health_plan = request.health_plan

        completing = request.status == VisitStatus.COMPLETED and previous != VisitStatus.COMPLETED
        if (
            request.responses is not None
            or request.completed_sections is not None
            or completing
            or template_changed
        ):
            template = await VisitService._load_template(visit.template_id)
            progression.apply_responses(
                visit,
                request.responses if request.responses is not None else visit.responses,
                request.completed_sections if request.completed_sections is not None else visit.completed_sections,
                template,
                require_complete=completing,
            )

        if request.status is not None and progression.transition(visit, request.status):
            logger.info(f"Visit {visit_id} moved from {previous.value} to {visit.status.value}")

        visit.update_timestamp()
        await visit.save()

        logger.info(f"Updated visit {visit_id}: {sorted(request.model_dump(exclude_unset=True))}")
        return await VisitService._response(visit)

    @staticmethod
    async def record_responses(visit_id: PydanticObjectId, request: RecordResponsesRequest) -> VisitResponse:
        """Replace the visit's answers and completed sections and mark it in progress."""
        visit = await VisitService.get_visit(visit_id)
        template = await VisitService._load_template(visit.template_id)

        previous = VisitStatus(visit.status)
        progression.record_responses(visit, request.responses, request.completed_sections, template)

        visit.update_timestamp()
        await visit.save()

        logger.info(
            f"Recorded {len(visit.responses)} responses on visit {visit_id} "
            f"({previous.value} -> {visit.status.value})"
        )
        return await VisitService._response(visit)

    @staticmethod
    async def complete_visit(visit_id: PydanticObjectId, request: RecordResponsesRequest) -> VisitResponse:
        """Save the final answers and mark the visit completed."""
        visit = await VisitService.get_visit(visit_id)
        template = await VisitService._load_template(visit.template_id)

        progression.complete(visit, request.responses, request.completed_sections, template)

        visit.update_timestamp()
        await visit.save()

        logger.info(f"Completed visit {visit_id}")
        return await VisitService._response(visit)

    @staticmethod
    async def delete_visit(visit_id: PydanticObjectId) -> None:
        visit = await VisitService.get_visit(visit_id)
        await visit.delete()
        logger.info(f"Deleted visit {visit_id}")
