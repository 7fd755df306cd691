"""
Activity repository for the user activity trail and the admin audit trail.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.repositories.base import BaseRepository
from tracker.models.activity import ActivityLog, AuditLog
from tracker.schemas.activity import ActivityLogCreate, AuditLogCreate


class ActivityRepository(BaseRepository[ActivityLog, ActivityLogCreate, ActivityLogCreate]):
    """Repository for activity and audit log entries."""

    def __init__(self, session: AsyncSession):
        """Initialize with session and ActivityLog model."""
        super().__init__(session=session, model=ActivityLog)

    async def add_activity(self, entry: ActivityLog) -> ActivityLog:
        """Stage an activity entry and flush it. Does not commit."""
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def add_audit(self, entry: AuditLog) -> AuditLog:
        """Stage an audit entry and flush it. Does not commit."""
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_activities(
        self,
        *,
        user_id: Optional[str] = None,
        action_type: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[ActivityLog]:
        """
        Get activity entries, newest first.

        Args:
            user_id: Only entries by this user
            action_type: Only entries of this type
            start: Only entries at or after this time
            end: Only entries at or before this time
            limit: Maximum entries to return
            offset: Entries to skip

        Returns:
            List[ActivityLog]: Matching entries
        """
        query = select(ActivityLog)
        if user_id:
            query = query.where(ActivityLog.user_id == user_id)
        if action_type:
            query = query.where(ActivityLog.action_type == action_type)
        if start:
            query = query.where(ActivityLog.created_at >= start)
        if end:
            query = query.where(ActivityLog.created_at <= end)

        query = query.order_by(desc(ActivityLog.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_audit_logs(
        self,
        *,
        admin_id: Optional[str] = None,
        action_type: Optional[str] = None,
        target_user_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[AuditLog]:
        """
        Get audit entries, newest first.

        Args:
            admin_id: Only changes made by this admin
            action_type: Only entries of this type
            target_user_id: Only changes to this user
            start: Only entries at or after this time
            end: Only entries at or before this time
            limit: Maximum entries to return
            offset: Entries to skip

        Returns:
            List[AuditLog]: Matching entries
        """
        query = select(AuditLog)
        if admin_id:
            query = query.where(AuditLog.admin_id == admin_id)
        if action_type:
            query = query.where(AuditLog.action_type == action_type)
        if target_user_id:
            query = query.where(AuditLog.target_user_id == target_user_id)
        if start:
            query = query.where(AuditLog.created_at >= start)
        if end:
            query = query.where(AuditLog.created_at <= end)

        query = query.order_by(desc(AuditLog.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_analytics(
        self,
        *,
        start: datetime,
        end: datetime,
        user_id: Optional[str] = None
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Count activity per day, user and action type within a window.

        Args:
            start: Window start
            end: Window end
            user_id: Optional user filter

        Returns:
            Dict: ``activities`` (daily counts) and ``summary`` (totals per user and action)
        """
        day = func.date(ActivityLog.created_at).label("date")
        conditions = [ActivityLog.created_at >= start, ActivityLog.created_at <= end]
        if user_id:
            conditions.append(ActivityLog.user_id == user_id)

        daily = await self.session.execute(
            select(
                day,
                ActivityLog.user_id,
                ActivityLog.user_name,
                ActivityLog.action_type,
                func.count(ActivityLog.id).label("count"),
            )
            .where(*conditions)
            .group_by(day, ActivityLog.user_id, ActivityLog.user_name, ActivityLog.action_type)
            .order_by(desc(day), ActivityLog.user_id)
        )
        totals = await self.session.execute(
            select(
                ActivityLog.user_id,
                ActivityLog.user_name,
                ActivityLog.action_type,
                func.count(ActivityLog.id).label("total_count"),
            )
            .where(*conditions)
            .group_by(ActivityLog.user_id, ActivityLog.user_name, ActivityLog.action_type)
        )

        return {
            "activities": [
                {
                    "date": str(row.date),
                    "user_id": row.user_id,
                    "user_name": row.user_name,
                    "action_type": row.action_type,
                    "count": row.count,
                }
                for row in daily.all()
            ],
            "summary": [
                {
                    "user_id": row.user_id,
                    "user_name": row.user_name,
                    "action_type": row.action_type,
                    "total_count": row.total_count,
                }
                for row in totals.all()
            ],
        }
