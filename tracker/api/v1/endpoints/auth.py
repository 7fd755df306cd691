"""
API endpoints for authentication.
"""
import logging
from typing import Optional

import jwt
from fastapi import APIRouter, Cookie, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.api.v1.dependencies import get_current_user
from tracker.core.config import settings
from tracker.core.exceptions import AuthenticationError, ConflictError
from tracker.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)
from tracker.db.repositories.users import UserRepository
from tracker.db.session import get_db
from tracker.models.user import User
from tracker.schemas.user import (
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterResponse,
    Token,
    UserCreate,
    UserResponse,
    UserRole,
)

router = APIRouter()
logger = logging.getLogger("tracker.auth")


async def _authenticate(session: AsyncSession, email: str, password: str) -> User:
    user = await UserRepository(session).get_by_email(email)
    # Same message for every failure so accounts cannot be probed
    if not user or not user.is_active:
        raise AuthenticationError("Invalid credentials")
    if not verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")
    return user


def _issue_tokens(user: User, response: Response) -> Token:
    access_token, expires_at = create_access_token(data={"sub": user.id, "role": user.role})
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=create_refresh_token(user.id),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
    )
    logger.info(f"Issued tokens for {user.email}")
    return Token(
        access_token=access_token,
        expires_at=expires_at,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    session: AsyncSession = Depends(get_db)
):
    """
    Register a new account. Self-registered accounts always get the user role.
    """
    user_repo = UserRepository(session)
    if await user_repo.get_by_email(user_data.email):
        raise ConflictError("Email already registered. Please use a different email or login.")

    user = await user_repo.create_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=UserRole.USER.value,
    )
    logger.info(f"Registered user {user.email}")
    return RegisterResponse(message="Account created successfully! You can now login.", user_id=user.id)


@router.post("/login", response_model=Token)
async def login(
    credentials: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db)
):
    """
    Sign in with email and password.

    The access token is returned in the body; the refresh token is set as
    an http-only cookie.
    """
    user = await _authenticate(session, credentials.email, credentials.password)
    return _issue_tokens(user, response)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(get_db)
):
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    user = await _authenticate(session, form_data.username, form_data.password)
    return _issue_tokens(user, response)


@router.post("/refresh", response_model=Token)
async def refresh_access_token(
    refresh_token: Optional[str] = Cookie(None, alias=settings.REFRESH_COOKIE_NAME),
    session: AsyncSession = Depends(get_db)
):
    """
    Exchange the refresh cookie for a new access token.
    """
    if not refresh_token:
        raise AuthenticationError("No refresh token")

    try:
        payload = decode_refresh_token(refresh_token)
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid refresh token")

    user = await UserRepository(session).get_by_id(payload.get("sub"))
    if not user or not user.is_active:
        raise AuthenticationError("Invalid refresh token")

    access_token, expires_at = create_access_token(data={"sub": user.id, "role": user.role})
    return Token(access_token=access_token, expires_at=expires_at, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """
    Clear the refresh cookie.
    """
    response.delete_cookie(settings.REFRESH_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=CurrentUser)
async def read_users_me(
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Get current user information.
    """
    return current_user
