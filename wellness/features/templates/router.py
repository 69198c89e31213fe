# Assessment Templates Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from wellness.features.auth.dependencies import get_current_user
from wellness.features.auth.models import User
from wellness.features.templates.schemas import (
    CreateTemplateRequest,
    UpdateTemplateRequest,
    QuestionDefinition,
    SectionDefinition,
    TemplateResponse,
    TemplateListResponse,
)
from wellness.features.templates.service import TemplateService
from wellness.shared.identifiers import parse_object_id
from wellness.shared.schemas import MessageResponse, OkResponse, PageParams, Pagination


router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get("", response_model=OkResponse[TemplateListResponse])
async def list_templates(
    name: Optional[str] = Query(None, max_length=200),
    is_active: Optional[bool] = None,
    paging: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
):
    """
    List templates, most recently updated first.

    - **name**: Case-insensitive name search
    - **is_active**: Only active (true) or retired (false) templates
    """
    templates, total = await TemplateService.list_templates(
        name=name,
        is_active=is_active,
        skip=paging.skip,
        limit=paging.limit,
    )

    return OkResponse(value=TemplateListResponse(
        templates=templates,
        pagination=Pagination.build(total, paging.page, paging.limit),
    ))


@router.post("", response_model=OkResponse[TemplateResponse], status_code=status.HTTP_201_CREATED)
async def create_template(
    request: CreateTemplateRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Create a template.

    Sections and questions sent without an **id** are given one.
    """
    template = await TemplateService.create_template(request, created_by=str(current_user.id))
    return OkResponse(value=template)


@router.get("/{template_id}", response_model=OkResponse[TemplateResponse])
async def get_template(
    template_id: str,
    current_user: User = Depends(get_current_user),
):
    """Get a template with all of its sections and questions."""
    oid = parse_object_id(template_id, "template")
    return OkResponse(value=await TemplateService.get_template_response(oid))


@router.put("/{template_id}", response_model=OkResponse[TemplateResponse])
async def update_template(
    template_id: str,
    request: UpdateTemplateRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Update a template.

    When **sections** is sent, every section and question must carry an
    identifier the template already has.
    """
    oid = parse_object_id(template_id, "template")
    return OkResponse(value=await TemplateService.update_template(oid, request))


@router.post(
    "/{template_id}/sections",
    response_model=OkResponse[TemplateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_section(
    template_id: str,
    request: SectionDefinition,
    current_user: User = Depends(get_current_user),
):
    """Append a new section to a template."""
    oid = parse_object_id(template_id, "template")
    return OkResponse(value=await TemplateService.add_section(oid, request))


@router.post(
    "/{template_id}/sections/{section_id}/questions",
    response_model=OkResponse[TemplateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_question(
    template_id: str,
    section_id: str,
    request: QuestionDefinition,
    current_user: User = Depends(get_current_user),
):
    """Append a new question to a template section."""
    oid = parse_object_id(template_id, "template")
    return OkResponse(value=await TemplateService.add_question(oid, section_id, request))


@router.delete("/{template_id}", response_model=OkResponse[MessageResponse])
async def delete_template(
    template_id: str,
    current_user: User = Depends(get_current_user),
):
    """Permanently delete a template."""
    oid = parse_object_id(template_id, "template")
    await TemplateService.delete_template(oid)

    return OkResponse(value=MessageResponse(message="Template deleted successfully"))
