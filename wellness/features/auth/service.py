from typing import Optional, Tuple
from beanie import PydanticObjectId
from bson import ObjectId

from wellness.features.auth.models import User, UserStatus
from wellness.features.auth.schemas import LoginRequest, UserResponse
from wellness.core.security import verify_password, create_access_token
from wellness.shared.exceptions import CredentialsException
from wellness.shared.models import utcnow
from wellness.core.logging import logger


class AuthService:
    """Authentication service for handling auth business logic."""

    @staticmethod
    def user_to_response(user: User) -> UserResponse:
        """Convert User model to response schema."""
        return UserResponse(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.role,
            status=user.status,
            phone=user.phone,
            title=user.title,
            specialty=user.specialty,
            npi=user.npi,
            last_login=user.last_login,
            invited_by=user.invited_by,
            invitation_sent_at=user.invitation_sent_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @staticmethod
    async def get_user_by_id(user_id: str) -> Optional[User]:
        """Look up a user by id; None for unknown or malformed ids."""
        if not ObjectId.is_valid(user_id):
            return None
        return await User.get(PydanticObjectId(user_id))

    @staticmethod
    async def login(login_data: LoginRequest) -> Tuple[UserResponse, str]:
        """
        Authenticate user and return access token.

        Returns:
            tuple: (user, access_token)
        """
        user = await User.find_one(User.email == login_data.email.lower())
        if not user or not user.password_hash:
            raise CredentialsException("Invalid email or password")

        if not verify_password(login_data.password, user.password_hash):
            raise CredentialsException("Invalid email or password")

        if user.status != UserStatus.ACTIVE:
            raise CredentialsException("Account is not active")

        user.last_login = utcnow()
        await user.save()

        access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
        logger.info(f"User {user.email} logged in")

        return AuthService.user_to_response(user), access_token
