# Users Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr

from wellness.features.auth.dependencies import get_current_user, require_admin, require_admin_or_provider
from wellness.features.auth.models import User, UserRole, UserStatus
from wellness.features.auth.schemas import UserResponse
from wellness.features.auth.service import AuthService
from wellness.features.users.schemas import (
    AcceptInvitationRequest,
    CreateUserRequest,
    InvitationResponse,
    InviteUserRequest,
    UpdateUserRequest,
    UserListResponse,
    VerifyInvitationResponse,
)
from wellness.features.users.service import UserService
from wellness.shared.identifiers import parse_object_id
from wellness.shared.schemas import MessageResponse, OkResponse, PageParams, Pagination


router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=OkResponse[UserListResponse])
async def list_users(
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[UserRole] = None,
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    paging: PageParams = Depends(),
    current_user: User = Depends(require_admin_or_provider),
):
    """
    List practice users. Admins and providers only.

    - **search**: Matches name or email (case-insensitive)
    - **role** / **status**: Exact filters
    """
    users, total = await UserService.list_users(
        skip=paging.skip,
        limit=paging.limit,
        search=search,
        role=role,
        status=user_status,
    )

    return OkResponse(value=UserListResponse(
        users=users,
        pagination=Pagination.build(total, paging.page, paging.limit),
    ))


@router.post("", response_model=OkResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    current_user: User = Depends(require_admin),
):
    """Create an active user directly. Admins only."""
    return OkResponse(value=await UserService.create_user(request))


@router.get("/me", response_model=OkResponse[UserResponse])
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile."""
    return OkResponse(value=AuthService.user_to_response(current_user))


@router.post("/invite", response_model=OkResponse[InvitationResponse])
async def invite_user(
    request: InviteUserRequest,
    current_user: User = Depends(require_admin),
):
    """
    Invite a new user to the practice. Admins only.

    - **email**: Invitee's email address; must not belong to an existing user
    - **name**: Invitee's name
    - **role**: admin, provider or staff
    """
    return OkResponse(value=await UserService.invite_user(request, invited_by=current_user))


@router.get("/invitations/verify", response_model=OkResponse[VerifyInvitationResponse])
async def verify_invitation(
    token: str = Query(..., min_length=1),
    email: EmailStr = Query(...),
):
    """Check whether an invitation link is still valid."""
    return OkResponse(value=await UserService.verify_invitation(token, email))


@router.post("/invitations/accept", response_model=OkResponse[UserResponse])
async def accept_invitation(request: AcceptInvitationRequest):
    """Complete registration from an invitation and activate the account."""
    return OkResponse(value=await UserService.accept_invitation(request))


@router.get("/{user_id}", response_model=OkResponse[UserResponse])
async def get_user(
    user_id: str,
    current_user: User = Depends(require_admin),
):
    oid = parse_object_id(user_id, "user")
    return OkResponse(value=AuthService.user_to_response(await UserService.get_user(oid)))


@router.put("/{user_id}", response_model=OkResponse[UserResponse])
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    current_user: User = Depends(require_admin),
):
    """Update a user's profile, role or status. Admins only."""
    oid = parse_object_id(user_id, "user")
    return OkResponse(value=await UserService.update_user(oid, request))


@router.delete("/{user_id}", response_model=OkResponse[MessageResponse])
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_admin),
):
    """Delete a user. Admins only."""
    oid = parse_object_id(user_id, "user")
    await UserService.delete_user(oid, current_user)

    return OkResponse(value=MessageResponse(message="User deleted successfully"))
