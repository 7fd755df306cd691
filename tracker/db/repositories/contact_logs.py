"""
ContactLog repository for outreach logs and follow-ups.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.repositories.base import BaseRepository
from tracker.models.contact import Contact
from tracker.models.contact_log import ContactLog, LogResponse
from tracker.schemas.contact_log import ContactLogCreate, ContactLogUpdate
from tracker.utils.datetime import utc_now
from tracker.utils.ids import generate_prefixed_id, IDPrefix

logger = logging.getLogger("tracker.db")


class ContactLogRepository(BaseRepository[ContactLog, ContactLogCreate, ContactLogUpdate]):
    """ContactLog repository for database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session and ContactLog model."""
        super().__init__(session=session, model=ContactLog)

    async def create_log(
        self,
        *,
        contact_id: str,
        contacted_by: Optional[str] = None,
        response: LogResponse = LogResponse.PENDING,
        follow_up_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> ContactLog:
        """
        Record an outreach attempt.

        Args:
            contact_id: Contact that was reached out to
            contacted_by: Name of the person who made contact
            response: Contact's response
            follow_up_date: Date to follow up on
            notes: Free-text notes

        Returns:
            ContactLog: Created log
        """
        log = ContactLog(
            id=generate_prefixed_id(IDPrefix.LOG),
            contact_id=contact_id,
            contacted_at=utc_now(),
            contacted_by=contacted_by or None,
            response=LogResponse(response).value,
            follow_up_date=follow_up_date,
            notes=notes or None,
            follow_up_completed=False,
        )
        self.session.add(log)
        await self.session.commit()
        await self.session.refresh(log)
        return log

    async def list_for_contact(self, contact_id: str) -> List[ContactLog]:
        """Get a contact's logs, most recent first."""
        result = await self.session.execute(
            select(ContactLog)
            .where(ContactLog.contact_id == contact_id)
            .order_by(desc(ContactLog.contacted_at))
        )
        return list(result.scalars().all())

    async def list_open_followups(
        self,
        due_on_or_before: Optional[date] = None
    ) -> List[Tuple[ContactLog, Contact]]:
        """
        Get follow-ups that have not been completed, earliest first.

        Args:
            due_on_or_before: Only include follow-ups due on or before this date

        Returns:
            List[Tuple[ContactLog, Contact]]: Logs with their contacts
        """
        query = (
            select(ContactLog, Contact)
            .join(Contact, Contact.id == ContactLog.contact_id)
            .where(
                ContactLog.follow_up_date.is_not(None),
                ContactLog.follow_up_completed.is_(False),
            )
            .order_by(ContactLog.follow_up_date)
        )
        if due_on_or_before is not None:
            query = query.where(ContactLog.follow_up_date <= due_on_or_before)

        result = await self.session.execute(query)
        return [(log, contact) for log, contact in result.all()]

    async def complete_followup(self, log_id: str) -> Optional[ContactLog]:
        """
        Mark a follow-up as done without touching the response.

        Args:
            log_id: Log ID

        Returns:
            ContactLog: Updated log or None if not found
        """
        log = await self.get_by_id(log_id)
        if not log:
            return None

        log.follow_up_completed = True
        log.follow_up_completed_at = utc_now()
        await self.session.commit()
        await self.session.refresh(log)

        logger.info(f"Follow-up completed for log {log_id}")
        return log
