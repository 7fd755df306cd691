"""
Recording who did what.

Contact work is written to the activity trail and admin changes to users
are written to the audit trail. Recording never fails the request that
triggered it: storage errors are logged and dropped.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.repositories.activity import ActivityRepository
from tracker.models.activity import ActivityLog, AuditLog
from tracker.schemas.user import CurrentUser
from tracker.utils.ids import generate_prefixed_id, IDPrefix

logger = logging.getLogger("tracker.activity")


class ActivityType:
    """Activity trail action types."""
    CONTACT_CREATED = "contact_created"
    CONTACT_LOGGED = "contact_logged"
    FOLLOWUP_COMPLETED = "followup_completed"
    REQUIREMENT_CREATED = "requirement_created"
    REQUIREMENT_DELETED = "requirement_deleted"
    REQUIREMENTS_CLEARED = "requirements_cleared"
    CONTACTS_IMPORTED = "contacts_imported"
    IMPORT_DELETED = "import_deleted"
    CONTACTS_CLEARED = "contacts_cleared"


class AuditType:
    """Audit trail action types."""
    USER_CREATED = "user_created"
    ROLE_CHANGED = "role_changed"
    STATUS_CHANGED = "status_changed"
    USER_DELETED = "user_deleted"


async def _record(session: AsyncSession, entry, kind: str) -> None:
    try:
        async with session.begin_nested():
            session.add(entry)
    except SQLAlchemyError as e:
        logger.error(f"Failed to record {kind} '{entry.action_type}': {str(e)}")
        return

    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to commit {kind} '{entry.action_type}': {str(e)}")


async def log_activity(
    session: AsyncSession,
    actor: CurrentUser,
    action_type: str,
    description: str,
    contact_id: Optional[str] = None,
    contact_name: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> None:
    """
    Append an entry to the activity trail.

    Args:
        session: Database session (committed by this call)
        actor: User who performed the action
        action_type: One of ActivityType
        description: Human-readable summary
        contact_id: Contact concerned, if any
        contact_name: Contact name at the time of the action
        metadata: Extra structured details
    """
    entry = ActivityLog(
        id=generate_prefixed_id(IDPrefix.ACTIVITY),
        user_id=actor.id,
        user_name=actor.name,
        user_email=actor.email,
        action_type=action_type,
        action_description=description,
        contact_id=contact_id,
        contact_name=contact_name,
        details=metadata,
    )
    await _record(session, entry, "activity")
    logger.debug(f"{actor.email} {action_type}: {description}")


async def log_audit(
    session: AsyncSession,
    admin: CurrentUser,
    action_type: str,
    description: str,
    target=None,
    old_value: Optional[str] = None,
    new_value: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> None:
    """
    Append an entry to the audit trail.

    Args:
        session: Database session (committed by this call)
        admin: Admin who made the change
        action_type: One of AuditType
        description: Human-readable summary
        target: User record that was changed
        old_value: Value before the change
        new_value: Value after the change
        metadata: Extra structured details
    """
    entry = AuditLog(
        id=generate_prefixed_id(IDPrefix.AUDIT),
        admin_id=admin.id,
        admin_name=admin.name,
        admin_email=admin.email,
        admin_role=admin.role.value if hasattr(admin.role, "value") else admin.role,
        action_type=action_type,
        action_description=description,
        target_user_id=getattr(target, "id", None),
        target_user_name=getattr(target, "name", None),
        target_user_email=getattr(target, "email", None),
        old_value=old_value,
        new_value=new_value,
        details=metadata,
    )
    await _record(session, entry, "audit entry")
    logger.info(f"Audit: {admin.email} {action_type}: {description}")
