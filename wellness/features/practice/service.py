# Practice Settings Feature - Service

from fastapi import UploadFile

from wellness.features.files.service import FileService
from wellness.features.practice.models import PracticeSettings
from wellness.features.practice.schemas import PracticeResponse, UpdatePracticeRequest
from wellness.shared.exceptions import NotFoundException
from wellness.core.logging import logger


DEFAULT_PRACTICE = {
    "name": "Healthcare Wellness Center",
    "address": "123 Medical Drive",
    "city": "Healthville",
    "state": "CA",
    "zip_code": "90210",
    "phone": "(555) 123-4567",
    "email": "info@healthcarewellness.com",
    "website": "www.healthcarewellness.com",
}


class PracticeService:
    """Service class for the practice settings singleton."""

    @staticmethod
    def practice_to_response(practice: PracticeSettings) -> PracticeResponse:
        return PracticeResponse(
            id=str(practice.id),
            name=practice.name,
            address=practice.address,
            city=practice.city,
            state=practice.state,
            zip_code=practice.zip_code,
            phone=practice.phone,
            email=practice.email,
            website=practice.website,
            tax_id=practice.tax_id,
            npi=practice.npi,
            logo_url=practice.logo_url,
            created_at=practice.created_at,
            updated_at=practice.updated_at,
        )

    @staticmethod
    async def get_practice() -> PracticeSettings:
        """Get the practice settings, creating the defaults on first read."""
        practice = await PracticeSettings.find_one({})
        if practice is None:
            practice = PracticeSettings(**DEFAULT_PRACTICE)
            await practice.insert()
            logger.info(f"Created default practice settings {practice.id}")
        return practice

    @staticmethod
    async def get_practice_response() -> PracticeResponse:
        return PracticeService.practice_to_response(await PracticeService.get_practice())

    @staticmethod
    async def update_practice(request: UpdatePracticeRequest) -> PracticeResponse:
        practice = await PracticeService.get_practice()

        for field, value in request.model_dump().items():
            setattr(practice, field, value)

        practice.update_timestamp()
        await practice.save()

        logger.info(f"Updated practice settings {practice.id}")
        return PracticeService.practice_to_response(practice)

    @staticmethod
    async def upload_logo(file: UploadFile) -> str:
        """Store a new logo, replacing the previous one."""
        practice = await PracticeService.get_practice()

        logo_url = await FileService.upload_practice_logo(file, old_logo_url=practice.logo_url)

        practice.logo_url = logo_url
        practice.update_timestamp()
        await practice.save()

        return logo_url

    @staticmethod
    async def delete_logo() -> None:
        practice = await PracticeService.get_practice()
        if not practice.logo_url:
            raise NotFoundException("No logo found")

        if not await FileService.delete_file(practice.logo_url):
            logger.warning(f"Logo file could not be removed from storage: {practice.logo_url}")

        practice.logo_url = None
        practice.update_timestamp()
        await practice.save()

        logger.info("Removed practice logo")
