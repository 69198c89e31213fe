# Assessment Templates Feature - Service

from typing import List, Optional, Tuple
from beanie import PydanticObjectId

from wellness.features.templates.models import Template
from wellness.features.templates.schemas import (
    CreateTemplateRequest,
    UpdateTemplateRequest,
    QuestionDefinition,
    SectionDefinition,
    TemplateResponse,
)
from wellness.features.templates.structure import (
    assign_identifiers,
    check_conditional_logic,
    reconcile_identifiers,
    template_identifiers,
)
from wellness.shared.exceptions import NotFoundException
from wellness.shared.queries import text_search
from wellness.core.logging import logger


class TemplateService:
    """Service class for assessment template operations."""

    @staticmethod
    def template_to_response(template: Template) -> TemplateResponse:
        """Convert Template model to response schema."""
        return TemplateResponse(
            id=str(template.id),
            name=template.name,
            description=template.description,
            sections=template.sections,
            is_active=template.is_active,
            version=template.version,
            created_by=template.created_by,
            created_at=template.created_at,
            updated_at=template.updated_at,
        )

    @staticmethod
    async def list_templates(
        name: Optional[str],
        is_active: Optional[bool],
        skip: int,
        limit: int,
    ) -> Tuple[List[TemplateResponse], int]:
        """Get a page of templates, most recently updated first."""
        filters = text_search(name, ["name"]) if name else {}
        if is_active is not None:
            filters["is_active"] = is_active

        query = Template.find(filters)
        total = await query.count()
        templates = await query.sort([("updated_at", -1)]).skip(skip).limit(limit).to_list()

        return [TemplateService.template_to_response(t) for t in templates], total

    @staticmethod
    async def get_template(template_id: PydanticObjectId) -> Template:
        template = await Template.get(template_id)
        if not template:
            raise NotFoundException("Template not found")
        return template

    @staticmethod
    async def get_template_response(template_id: PydanticObjectId) -> TemplateResponse:
        return TemplateService.template_to_response(await TemplateService.get_template(template_id))

    @staticmethod
    async def create_template(request: CreateTemplateRequest, created_by: Optional[str]) -> TemplateResponse:
        """Create a template, assigning identifiers to sections and questions that lack one."""
        sections = assign_identifiers(request.sections)
        check_conditional_logic(sections)

        template = Template(
            name=request.name,
            description=request.description,
            sections=sections,
            is_active=request.is_active,
            created_by=created_by,
        )
        await template.insert()

        logger.info(f"Created template {template.id} '{template.name}' with {len(sections)} sections")
        return TemplateService.template_to_response(template)

    @staticmethod
    async def update_template(template_id: PydanticObjectId, request: UpdateTemplateRequest) -> TemplateResponse:
        """
        Update a template.

        Sent sections replace the stored ones but must reuse existing
        identifiers. The version is bumped on every update.
        """
        template = await TemplateService.get_template(template_id)
        update_dict = request.model_dump(exclude_unset=True, exclude_none=True, exclude={"sections"})

        if request.sections is not None:
            sections = reconcile_identifiers(template.sections, request.sections)
            check_conditional_logic(sections)
            template.sections = sections

        for field, value in update_dict.items():
            setattr(template, field, value)

        template.version += 1
        template.update_timestamp()
        await template.save()

        logger.info(f"Updated template {template_id} to version {template.version}")
        return TemplateService.template_to_response(template)

    @staticmethod
    async def add_section(template_id: PydanticObjectId, definition: SectionDefinition) -> TemplateResponse:
        """Append a new section; identifiers are assigned here."""
        template = await TemplateService.get_template(template_id)

        [section] = assign_identifiers([definition], taken=template_identifiers(template.sections))
        sections = template.sections + [section]
        check_conditional_logic(sections)

        template.sections = sections
        template.version += 1
        template.update_timestamp()
        await template.save()

        logger.info(f"Added section {section.id} to template {template_id}")
        return TemplateService.template_to_response(template)

    @staticmethod
    async def add_question(
        template_id: PydanticObjectId,
        section_id: str,
        definition: QuestionDefinition,
    ) -> TemplateResponse:
        """Append a new question to a section; its identifier is assigned here."""
        template = await TemplateService.get_template(template_id)

        section = template.find_section(section_id)
        if section is None:
            raise NotFoundException("Section not found")

        [wrapper] = assign_identifiers(
            [SectionDefinition(id=None, title=section.title, questions=[definition])],
            taken=template_identifiers(template.sections),
        )
        question = wrapper.questions[0]
        section.questions.append(question)
        check_conditional_logic(template.sections)

        template.version += 1
        template.update_timestamp()
        await template.save()

        logger.info(f"Added question {question.id} to section {section_id} of template {template_id}")
        return TemplateService.template_to_response(template)

    @staticmethod
    async def delete_template(template_id: PydanticObjectId) -> None:
        """Remove a template outright. Visits keep their template_id reference."""
        template = await TemplateService.get_template(template_id)
        await template.delete()
        logger.info(f"Deleted template {template_id}")
