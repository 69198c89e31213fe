from fastapi import APIRouter, Depends

from wellness.features.auth.schemas import LoginRequest, LoginResponse, UserResponse
from wellness.features.auth.service import AuthService
from wellness.features.auth.dependencies import get_current_user
from wellness.features.auth.models import User
from wellness.shared.schemas import OkResponse


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=OkResponse[LoginResponse])
async def login(login_data: LoginRequest):
    """
    Authenticate user and return access token.

    - **email**: User's email address
    - **password**: User's password
    """
    user, access_token = await AuthService.login(login_data)

    return OkResponse(value=LoginResponse(access_token=access_token, user=user))


@router.get("/me", response_model=OkResponse[UserResponse])
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's account."""
    return OkResponse(value=AuthService.user_to_response(current_user))
