# Patient Records Feature - Router

from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, status

from wellness.features.auth.dependencies import get_current_user
from wellness.features.auth.models import User
from wellness.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    PatientResponse,
    PatientListResponse,
)
from wellness.features.patients.service import PatientService
from wellness.shared.identifiers import parse_object_id
from wellness.shared.schemas import MessageResponse, OkResponse, PageParams, Pagination, SortOrder


router = APIRouter(prefix="/patients", tags=["Patients"])

PatientSortField = Literal["last_name", "first_name", "date_of_birth", "created_at", "updated_at"]


@router.get("", response_model=OkResponse[PatientListResponse])
async def list_patients(
    search: Optional[str] = Query(None, max_length=100),
    sort_field: PatientSortField = "last_name",
    sort_order: SortOrder = "asc",
    paging: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
):
    """
    List patients.

    - **search**: Matches first/last name, email or phone (case-insensitive)
    - **sort_field** / **sort_order**: Ordering (default last name, ascending)
    """
    patients, total = await PatientService.list_patients(
        search=search,
        skip=paging.skip,
        limit=paging.limit,
        sort_field=sort_field,
        sort_order=sort_order,
    )

    return OkResponse(value=PatientListResponse(
        patients=patients,
        pagination=Pagination.build(total, paging.page, paging.limit),
    ))


@router.post("", response_model=OkResponse[PatientResponse], status_code=status.HTTP_201_CREATED)
async def create_patient(
    request: CreatePatientRequest,
    current_user: User = Depends(get_current_user),
):
    """Create a new patient record."""
    return OkResponse(value=await PatientService.create_patient(request))


@router.get("/{patient_id}", response_model=OkResponse[PatientResponse])
async def get_patient(
    patient_id: str,
    current_user: User = Depends(get_current_user),
):
    """Get a patient by id."""
    oid = parse_object_id(patient_id, "patient")
    return OkResponse(value=await PatientService.get_patient_response(oid))


@router.put("/{patient_id}", response_model=OkResponse[PatientResponse])
async def update_patient(
    patient_id: str,
    request: UpdatePatientRequest,
    current_user: User = Depends(get_current_user),
):
    """Update a patient's information. Only the fields sent are changed."""
    oid = parse_object_id(patient_id, "patient")
    return OkResponse(value=await PatientService.update_patient(oid, request))


@router.delete("/{patient_id}", response_model=OkResponse[MessageResponse])
async def delete_patient(
    patient_id: str,
    current_user: User = Depends(get_current_user),
):
    """
    Permanently delete a patient.

    Fails with 409 while visits still reference the patient.
    """
    oid = parse_object_id(patient_id, "patient")
    await PatientService.delete_patient(oid)

    return OkResponse(value=MessageResponse(message="Patient deleted successfully"))
