"""
Dependencies for API endpoints.
"""
import logging
from typing import Callable

import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from tracker.core.azure_auth import get_azure_validator, is_azure_token
from tracker.core.config import settings
from tracker.core.exceptions import AuthenticationError, AuthorizationError
from tracker.core.security import decode_access_token
from tracker.db.repositories.users import UserRepository
from tracker.db.session import get_repository_context
from tracker.schemas.user import CurrentUser, UserRole

logger = logging.getLogger("tracker.auth")

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/token", auto_error=False)


async def _azure_user(token: str) -> CurrentUser:
    identity = await get_azure_validator().validate(token)

    if identity.email:
        async with get_repository_context(UserRepository) as user_repo:
            user = await user_repo.get_by_email(identity.email)
        if user:
            if not user.is_active:
                raise AuthenticationError("User is inactive")
            principal = CurrentUser.model_validate(user)
            return principal.model_copy(update={"auth_provider": "azure"})

    # Microsoft account without a local record
    return CurrentUser(
        id=identity.id,
        name=identity.name,
        email=identity.email or "",
        role=UserRole.USER,
        auth_provider="azure",
    )


async def _local_user(token: str) -> CurrentUser:
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid token")

    # Own session so the request session stays free for explicit transactions
    async with get_repository_context(UserRepository) as user_repo:
        user = await user_repo.get_by_id(payload.get("sub"))
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User is inactive")

    return CurrentUser.model_validate(user)


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """
    Get the current authenticated user from the bearer token.

    Tokens issued by Azure AD are verified against the tenant's signing keys
    when Azure sign-in is enabled; anything else must be a local access token.

    Args:
        token: JWT token from Authorization header

    Returns:
        CurrentUser: The authenticated user

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    if not token:
        raise AuthenticationError("Not authenticated")

    if settings.AZURE_AUTH_ENABLED and is_azure_token(token):
        return await _azure_user(token)
    return await _local_user(token)


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that only lets the given roles through.

    Usage:
        current_user: CurrentUser = Depends(require_roles(UserRole.ADMIN, UserRole.SUPERADMIN))
    """
    allowed = {UserRole(role) for role in roles}

    async def _check_role(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            logger.warning(f"{current_user.email} ({current_user.role.value}) denied; needs {sorted(r.value for r in allowed)}")
            raise AuthorizationError("Access denied. Insufficient permissions.")
        return current_user

    return _check_role


require_admin = require_roles(UserRole.ADMIN, UserRole.SUPERADMIN)
require_superadmin = require_roles(UserRole.SUPERADMIN)
