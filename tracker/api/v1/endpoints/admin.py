"""
API endpoints for user administration and activity reporting.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.api.v1.dependencies import require_admin, require_superadmin
from tracker.core.exceptions import AuthorizationError, BadRequestError, ConflictError, NotFoundError
from tracker.db.repositories.activity import ActivityRepository
from tracker.db.repositories.users import UserRepository
from tracker.db.session import get_db
from tracker.models.user import User
from tracker.schemas.activity import (
    ActivityLogResponse,
    AnalyticsPeriod,
    AnalyticsResponse,
    AuditLogResponse,
)
from tracker.schemas.user import (
    AdminUserCreate,
    CurrentUser,
    MessageResponse,
    RoleUpdate,
    StatusUpdate,
    UserResponse,
    UserRole,
)
from tracker.services.activity import AuditType, log_audit
from tracker.utils.datetime import days_ago, utc_now

router = APIRouter()
logger = logging.getLogger("tracker.admin")


async def _get_other_user(user_repo: UserRepository, user_id: str, current_user: CurrentUser, action: str) -> User:
    if user_id == current_user.id:
        raise BadRequestError(f"You cannot {action}")
    user = await user_repo.get_by_id(user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


async def _analytics(session: AsyncSession, days: int, user_id: Optional[str]) -> AnalyticsResponse:
    end = utc_now()
    start = days_ago(days)
    data = await ActivityRepository(session).get_analytics(start=start, end=end, user_id=user_id)
    return AnalyticsResponse(**data, period=AnalyticsPeriod(start=start, end=end, days=days))


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    current_user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db)
):
    """List every user account."""
    return await UserRepository(session).list_users()


@router.post("/create-user", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: AdminUserCreate,
    current_user: CurrentUser = Depends(require_superadmin),
    session: AsyncSession = Depends(get_db)
):
    """
    Create an account with any role. Superadmins only.
    """
    user_repo = UserRepository(session)
    if await user_repo.get_by_email(user_data.email):
        raise ConflictError("Email already registered")

    user = await user_repo.create_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role.value,
    )
    await log_audit(
        session,
        current_user,
        AuditType.USER_CREATED,
        f"Created user {user.email} with role {user.role}",
        target=user,
        new_value=user.role,
    )
    return user


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    role_data: RoleUpdate,
    current_user: CurrentUser = Depends(require_superadmin),
    session: AsyncSession = Depends(get_db)
):
    """
    Change a user's role. Superadmins only, and never their own.
    """
    user_repo = UserRepository(session)
    user = await _get_other_user(user_repo, user_id, current_user, "change your own role")

    old_role = user.role
    user = await user_repo.update(id=user_id, obj_in={"role": role_data.role.value})
    await log_audit(
        session,
        current_user,
        AuditType.ROLE_CHANGED,
        f"Changed role of {user.email} from {old_role} to {user.role}",
        target=user,
        old_value=old_role,
        new_value=user.role,
    )
    return user


@router.patch("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: str,
    status_data: StatusUpdate,
    current_user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Activate or deactivate a user.

    Nobody may change their own status, and admins may not touch superadmins.
    """
    user_repo = UserRepository(session)
    user = await _get_other_user(user_repo, user_id, current_user, "change your own status")
    if user.role == UserRole.SUPERADMIN.value and current_user.role != UserRole.SUPERADMIN:
        raise AuthorizationError("Admins cannot change the status of a superadmin")

    old_status = user.is_active
    user = await user_repo.update(id=user_id, obj_in={"is_active": status_data.is_active})
    await log_audit(
        session,
        current_user,
        AuditType.STATUS_CHANGED,
        f"{'Activated' if user.is_active else 'Deactivated'} user {user.email}",
        target=user,
        old_value="active" if old_status else "inactive",
        new_value="active" if user.is_active else "inactive",
    )
    return user


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    current_user: CurrentUser = Depends(require_superadmin),
    session: AsyncSession = Depends(get_db)
):
    """
    Delete a user account. Superadmins only, and never their own.
    """
    user_repo = UserRepository(session)
    user = await _get_other_user(user_repo, user_id, current_user, "delete your own account")

    snapshot = UserResponse.model_validate(user)
    await user_repo.delete(id=user_id)
    await log_audit(
        session,
        current_user,
        AuditType.USER_DELETED,
        f"Deleted user {snapshot.email}",
        target=snapshot,
        old_value=snapshot.role.value,
    )
    return MessageResponse(message="User deleted successfully")


@router.get("/activities", response_model=List[ActivityLogResponse])
async def list_activities(
    user_id: Optional[str] = None,
    action_type: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db)
):
    """Activity trail, newest first."""
    return await ActivityRepository(session).list_activities(
        user_id=user_id,
        action_type=action_type,
        start=start,
        end=end,
        limit=limit,
        offset=offset,
    )


@router.get("/audit-logs", response_model=List[AuditLogResponse])
async def list_audit_logs(
    admin_id: Optional[str] = None,
    action_type: Optional[str] = None,
    target_user_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(require_superadmin),
    session: AsyncSession = Depends(get_db)
):
    """Audit trail of user administration, newest first. Superadmins only."""
    return await ActivityRepository(session).list_audit_logs(
        admin_id=admin_id,
        action_type=action_type,
        target_user_id=target_user_id,
        start=start,
        end=end,
        limit=limit,
        offset=offset,
    )


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    days: int = Query(30, ge=1, le=365),
    user_id: Optional[str] = None,
    current_user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Activity counts per day, user and action type over the last ``days`` days.
    """
    return await _analytics(session, days, user_id)


@router.get("/users/{user_id}/analytics", response_model=AnalyticsResponse)
async def get_user_analytics(
    user_id: str,
    days: int = Query(30, ge=1, le=365),
    current_user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Activity counts for one user over the last ``days`` days.
    """
    if not await UserRepository(session).get_by_id(user_id):
        raise NotFoundError(f"User {user_id} not found")
    return await _analytics(session, days, user_id)
