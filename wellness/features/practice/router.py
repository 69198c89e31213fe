# Practice Settings Feature - Router

from fastapi import APIRouter, Depends, File, UploadFile

from wellness.features.auth.dependencies import get_current_user, require_admin_or_provider
from wellness.features.auth.models import User
from wellness.features.practice.schemas import LogoResponse, PracticeResponse, UpdatePracticeRequest
from wellness.features.practice.service import PracticeService
from wellness.shared.schemas import MessageResponse, OkResponse


router = APIRouter(prefix="/practice", tags=["Practice"])


@router.get("", response_model=OkResponse[PracticeResponse])
async def get_practice(current_user: User = Depends(get_current_user)):
    """
    Get the practice settings.

    Default settings are created the first time they are read.
    """
    return OkResponse(value=await PracticeService.get_practice_response())


@router.put("", response_model=OkResponse[PracticeResponse])
async def update_practice(
    request: UpdatePracticeRequest,
    current_user: User = Depends(require_admin_or_provider),
):
    """
    Replace the practice settings. Admins and providers only.

    - **name**, **address**, **city**, **state**, **zip_code**, **phone**, **email**: Required
    - **website**, **tax_id**, **npi**: Optional
    """
    return OkResponse(value=await PracticeService.update_practice(request))


@router.post("/logo", response_model=OkResponse[LogoResponse])
async def upload_logo(
    file: UploadFile = File(...),
    current_user: User = Depends(require_admin_or_provider),
):
    """
    Upload the practice logo. Admins and providers only.

    Accepts JPG or PNG up to 2MB; images are resized to at most 512x512.
    """
    logo_url = await PracticeService.upload_logo(file)
    return OkResponse(value=LogoResponse(logo_url=logo_url))


@router.delete("/logo", response_model=OkResponse[MessageResponse])
async def delete_logo(current_user: User = Depends(require_admin_or_provider)):
    """Remove the practice logo. Admins and providers only."""
    await PracticeService.delete_logo()
    return OkResponse(value=MessageResponse(message="Logo removed successfully"))
