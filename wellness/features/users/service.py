# Users Feature - Service

from typing import List, Optional, Tuple
from beanie import PydanticObjectId

from wellness.features.auth.models import User, UserRole, UserStatus
from wellness.features.auth.schemas import UserResponse
from wellness.features.auth.service import AuthService
from wellness.features.users.schemas import (
    AcceptInvitationRequest,
    CreateUserRequest,
    InvitationResponse,
    InviteUserRequest,
    UpdateUserRequest,
    VerifyInvitationResponse,
)
from wellness.core.email import send_invitation_email
from wellness.core.security import generate_invite_token, get_password_hash
from wellness.shared.exceptions import BadRequestException, ConflictException, NotFoundException
from wellness.shared.queries import text_search
from wellness.shared.models import utcnow
from wellness.core.logging import logger


class UserService:
    """Service class for practice user management and invitations."""

    @staticmethod
    async def list_users(
        skip: int,
        limit: int,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
    ) -> Tuple[List[UserResponse], int]:
        """Get a page of users, newest first."""
        filters = text_search(search, ["name", "email"]) if search else {}
        if role:
            filters["role"] = UserRole(role).value
        if status:
            filters["status"] = UserStatus(status).value

        query = User.find(filters)
        total = await query.count()
        users = await query.sort([("created_at", -1)]).skip(skip).limit(limit).to_list()

        return [AuthService.user_to_response(u) for u in users], total

    @staticmethod
    async def get_user(user_id: PydanticObjectId) -> User:
        user = await User.get(user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    @staticmethod
    async def _ensure_email_free(email: str) -> None:
        if await User.find_one(User.email == email.lower()):
            raise ConflictException("User with this email already exists")

    @staticmethod
    async def create_user(request: CreateUserRequest) -> UserResponse:
        """Create an active user with a password, skipping the invitation flow."""
        await UserService._ensure_email_free(request.email)

        user = User(
            email=request.email,
            name=request.name,
            role=request.role,
            status=UserStatus.ACTIVE,
            password_hash=get_password_hash(request.password),
            phone=request.phone,
            title=request.title,
            specialty=request.specialty,
            npi=request.npi,
        )
        await user.insert()

        logger.info(f"Created {user.role.value} user {user.email}")
        return AuthService.user_to_response(user)

    @staticmethod
    async def update_user(user_id: PydanticObjectId, request: UpdateUserRequest) -> UserResponse:
        user = await UserService.get_user(user_id)

        update_dict = request.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_dict.items():
            setattr(user, field, value)

        user.update_timestamp()
        await user.save()

        logger.info(f"Updated user {user_id}: {sorted(update_dict)}")
        return AuthService.user_to_response(user)

    @staticmethod
    async def delete_user(user_id: PydanticObjectId, current_user: User) -> None:
        """Delete a user. Administrators cannot delete their own account."""
        if str(user_id) == str(current_user.id):
            raise BadRequestException("You cannot delete your own account")

        user = await UserService.get_user(user_id)
        await user.delete()
        logger.info(f"Deleted user {user.email}")

    @staticmethod
    async def invite_user(request: InviteUserRequest, invited_by: User) -> InvitationResponse:
        """
        Invite a new user.

        A pending user is created with a one-time token; the invitation
        email is best effort and a failed send is only logged.
        """
        await UserService._ensure_email_free(request.email)

        user = User(
            email=request.email,
            name=request.name,
            role=request.role,
            status=UserStatus.PENDING,
            invited_by=str(invited_by.id),
            invite_token=generate_invite_token(),
            invitation_sent_at=utcnow(),
        )
        await user.insert()
        logger.info(f"{invited_by.email} invited {user.email} as {user.role.value}")

        try:
            email_sent = await send_invitation_email(
                user.email,
                user.name,
                user.role.value,
                invited_by.name,
                user.invite_token,
            )
        except Exception as e:
            logger.error(f"Failed to send invitation email to {user.email}: {type(e).__name__}: {e}")
            email_sent = False

        return InvitationResponse(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.role,
            status=user.status,
            invited_by=user.invited_by,
            invitation_sent_at=user.invitation_sent_at,
            email_sent=email_sent,
        )

    @staticmethod
    async def _find_invitation(token: str, email: str) -> Optional[User]:
        if not token:
            return None
        return await User.find_one(
            User.email == email.lower(),
            User.invite_token == token,
            User.status == UserStatus.PENDING,
        )

    @staticmethod
    async def verify_invitation(token: str, email: str) -> VerifyInvitationResponse:
        user = await UserService._find_invitation(token, email)
        if user is None:
            return VerifyInvitationResponse(valid=False)
        return VerifyInvitationResponse(valid=True, email=user.email, name=user.name, role=user.role)

    @staticmethod
    async def accept_invitation(request: AcceptInvitationRequest) -> UserResponse:
        """Activate an invited user and set their password."""
        user = await UserService._find_invitation(request.token, request.email)
        if user is None:
            raise BadRequestException("Invalid or expired invitation")

        user.password_hash = get_password_hash(request.password)
        user.status = UserStatus.ACTIVE
        user.invite_token = None
        user.update_timestamp()
        await user.save()

        logger.info(f"User {user.email} accepted invitation")
        return AuthService.user_to_response(user)
