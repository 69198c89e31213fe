from typing import Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from wellness.features.auth.models import User, UserRole, UserStatus
from wellness.features.auth.service import AuthService
from wellness.core.security import decode_token
from wellness.core.logging import logger
from wellness.shared.exceptions import CredentialsException, ForbiddenException


# Missing credentials are reported as 401 by get_current_user, not 403 by the scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    """
    Dependency to get current authenticated user.

    Args:
        credentials: HTTP Bearer credentials

    Returns:
        User: Current authenticated user

    Raises:
        CredentialsException: If credentials are missing or invalid
    """
    if credentials is None:
        raise CredentialsException()

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise CredentialsException("Invalid authentication credentials")

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise CredentialsException("Invalid authentication credentials")

    user = await AuthService.get_user_by_id(user_id)
    if user is None:
        logger.warning(f"Token subject {user_id} does not match any user")
        raise CredentialsException("User not found")

    if user.status != UserStatus.ACTIVE:
        raise CredentialsException("Account is not active")

    return user


def has_role(user: User, roles: Iterable[UserRole]) -> bool:
    """Role membership test; admins pass every check."""
    role = user.role
    return role == UserRole.ADMIN or role in tuple(roles)


def require_roles(*roles: UserRole, detail: Optional[str] = None):
    """Build a dependency that admits only callers holding one of ``roles``."""

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_role(current_user, roles):
            logger.info(f"User {current_user.email} ({current_user.role}) denied, requires {[r.value for r in roles]}")
            raise ForbiddenException(detail or "You do not have permission to perform this action")
        return current_user

    return dependency


require_admin = require_roles(
    UserRole.ADMIN,
    detail="Only administrators can perform this action",
)

require_admin_or_provider = require_roles(UserRole.ADMIN, UserRole.PROVIDER)
