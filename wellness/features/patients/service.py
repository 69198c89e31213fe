# Patient Records Feature - Service

from typing import Optional, List, Tuple
from datetime import datetime
from beanie import PydanticObjectId

from wellness.features.patients.models import Patient
from wellness.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    PatientResponse,
)
from wellness.shared.exceptions import NotFoundException, ConflictException
from wellness.shared.queries import text_search
from wellness.shared.schemas import SortOrder, sort_spec
from wellness.core.logging import logger


SEARCH_FIELDS = ("first_name", "last_name", "email", "phone")


class PatientService:
    """Service class for patient record operations."""

    @staticmethod
    def patient_to_response(patient: Patient) -> PatientResponse:
        """Convert Patient model to response schema."""
        return PatientResponse(
            id=str(patient.id),
            first_name=patient.first_name,
            last_name=patient.last_name,
            date_of_birth=patient.date_of_birth,
            gender=patient.gender,
            email=patient.email,
            phone=patient.phone,
            address=patient.address,
            medical_record_number=patient.medical_record_number,
            primary_care_provider_id=patient.primary_care_provider_id,
            insurance=patient.insurance,
            medical_history=patient.medical_history,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
        )

    @staticmethod
    async def list_patients(
        search: Optional[str],
        skip: int,
        limit: int,
        sort_field: str = "last_name",
        sort_order: SortOrder = "asc",
    ) -> Tuple[List[PatientResponse], int]:
        """
        Get a page of patients.

        Args:
            search: Free text matched against name, email and phone
            skip: Records to skip
            limit: Page size
            sort_field: Field to order by
            sort_order: "asc" or "desc"

        Returns:
            Tuple of (patients, total matching count)
        """
        query = Patient.find(text_search(search, SEARCH_FIELDS) if search else {})

        total = await query.count()
        patients = await query.sort(sort_spec(sort_field, sort_order)).skip(skip).limit(limit).to_list()

        return [PatientService.patient_to_response(p) for p in patients], total

    @staticmethod
    async def get_patient(patient_id: PydanticObjectId) -> Patient:
        """Get a patient by id."""
        patient = await Patient.get(patient_id)
        if not patient:
            raise NotFoundException("Patient not found")
        return patient

    @staticmethod
    async def get_patient_response(patient_id: PydanticObjectId) -> PatientResponse:
        return PatientService.patient_to_response(await PatientService.get_patient(patient_id))

    @staticmethod
    async def create_patient(request: CreatePatientRequest) -> PatientResponse:
        """Create a new patient record."""
        if request.medical_record_number:
            existing = await Patient.find_one(
                Patient.medical_record_number == request.medical_record_number
            )
            if existing:
                raise ConflictException("A patient with this medical record number already exists")

        patient = Patient(**request.model_dump())
        await patient.insert()

        logger.info(f"Created patient {patient.id} ({patient.last_name}, {patient.first_name})")
        return PatientService.patient_to_response(patient)

    @staticmethod
    async def update_patient(patient_id: PydanticObjectId, request: UpdatePatientRequest) -> PatientResponse:
        """Shallow-merge the provided fields into the stored patient."""
        patient = await PatientService.get_patient(patient_id)

        update_dict = request.model_dump(exclude_unset=True)

        merged = {**patient.model_dump(exclude={"id", "revision_id"}), **update_dict}
        # Re-run schema validation over the merged record
        CreatePatientRequest.model_validate(
            {k: v for k, v in merged.items() if k in CreatePatientRequest.model_fields}
        )

        for field, value in update_dict.items():
            setattr(patient, field, getattr(request, field))

        patient.update_timestamp()
        await patient.save()

        logger.info(f"Updated patient {patient_id}: {sorted(update_dict)}")
        return PatientService.patient_to_response(patient)

    @staticmethod
    async def delete_patient(patient_id: PydanticObjectId) -> None:
        """
        Permanently delete a patient.

        Refused while any visit still references the patient.
        """
        from wellness.features.visits.models import Visit

        patient = await PatientService.get_patient(patient_id)

        visit_count = await Visit.find(Visit.patient_id == str(patient_id)).count()
        if visit_count:
            raise ConflictException(
                f"Patient has {visit_count} visit(s); delete or reassign them first"
            )

        await patient.delete()
        logger.info(f"Deleted patient {patient_id}")
