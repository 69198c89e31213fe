# Wellness Visits Feature - Router

from typing import Literal, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, Query, status

from wellness.features.auth.dependencies import get_current_user
from wellness.features.auth.models import User
from wellness.features.visits.models import VisitStatus
from wellness.features.visits.schemas import (
    CreateVisitRequest,
    UpdateVisitRequest,
    RecordResponsesRequest,
    VisitResponse,
    VisitListResponse,
)
from wellness.features.visits.service import VisitService
from wellness.shared.identifiers import parse_object_id
from wellness.shared.schemas import MessageResponse, OkResponse, PageParams, Pagination, SortOrder


router = APIRouter(prefix="/visits", tags=["Visits"])

VisitSortField = Literal["scheduled_date", "status", "created_at", "updated_at", "completed_at"]


@router.get("", response_model=OkResponse[VisitListResponse])
async def list_visits(
    patient_id: Optional[str] = None,
    provider_id: Optional[str] = None,
    visit_status: Optional[VisitStatus] = Query(None, alias="status"),
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    sort_field: VisitSortField = "scheduled_date",
    sort_order: SortOrder = "desc",
    paging: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
):
    """
    List visits, newest scheduled date first by default.

    - **patient_id** / **provider_id**: Only visits for this patient or provider
    - **status**: Only visits in this status
    - **from_date** / **to_date**: Inclusive bounds on the scheduled date
    """
    if patient_id:
        parse_object_id(patient_id, "patient")
    if provider_id:
        parse_object_id(provider_id, "provider")

    visits, total = await VisitService.list_visits(
        skip=paging.skip,
        limit=paging.limit,
        patient_id=patient_id,
        provider_id=provider_id,
        status=visit_status,
        from_date=from_date,
        to_date=to_date,
        sort_field=sort_field,
        sort_order=sort_order,
    )

    return OkResponse(value=VisitListResponse(
        visits=visits,
        pagination=Pagination.build(total, paging.page, paging.limit),
    ))


@router.post("", response_model=OkResponse[VisitResponse], status_code=status.HTTP_201_CREATED)
async def create_visit(
    request: CreateVisitRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Schedule a visit.

    New visits start as **scheduled** with no responses.
    """
    return OkResponse(value=await VisitService.create_visit(request))


@router.get("/{visit_id}", response_model=OkResponse[VisitResponse])
async def get_visit(
    visit_id: str,
    current_user: User = Depends(get_current_user),
):
    """Get a visit with its patient and provider."""
    oid = parse_object_id(visit_id, "visit")
    return OkResponse(value=await VisitService.get_visit_response(oid))


@router.put("/{visit_id}", response_model=OkResponse[VisitResponse])
async def update_visit(
    visit_id: str,
    request: UpdateVisitRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Update a visit.

    Status changes follow scheduled -> in-progress -> completed, with
    cancelled and no-show reachable until the visit is finished.
    """
    oid = parse_object_id(visit_id, "visit")
    return OkResponse(value=await VisitService.update_visit(oid, request))


@router.put("/{visit_id}/responses", response_model=OkResponse[VisitResponse])
async def record_responses(
    visit_id: str,
    request: RecordResponsesRequest,
    current_user: User = Depends(get_current_user),
):
    """Save assessment progress. Replaces previously stored responses."""
    oid = parse_object_id(visit_id, "visit")
    return OkResponse(value=await VisitService.record_responses(oid, request))


@router.post("/{visit_id}/complete", response_model=OkResponse[VisitResponse])
async def complete_visit(
    visit_id: str,
    request: RecordResponsesRequest,
    current_user: User = Depends(get_current_user),
):
    """Submit the final assessment and mark the visit completed."""
    oid = parse_object_id(visit_id, "visit")
    return OkResponse(value=await VisitService.complete_visit(oid, request))


@router.delete("/{visit_id}", response_model=OkResponse[MessageResponse])
async def delete_visit(
    visit_id: str,
    current_user: User = Depends(get_current_user),
):
    """Permanently delete a visit."""
    oid = parse_object_id(visit_id, "visit")
    await VisitService.delete_visit(oid)

    return OkResponse(value=MessageResponse(message="Visit deleted successfully"))
