"""
Contact repository for database operations related to contacts.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from sqlalchemy import delete, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.repositories.base import BaseRepository
from tracker.models.contact import Contact
from tracker.models.contact_log import ContactLog
from tracker.models.requirement import Requirement
from tracker.schemas.contact import ContactCreate, ContactUpdate
from tracker.utils.chunking import chunked
from tracker.utils.ids import generate_prefixed_id, IDPrefix

logger = logging.getLogger("tracker.db")

# Default IN-clause batch for lookups that are not tied to import settings
DEFAULT_LOOKUP_BATCH_SIZE = 400


class ContactRepository(BaseRepository[Contact, ContactCreate, ContactUpdate]):
    """Contact repository for database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session and Contact model."""
        super().__init__(session=session, model=Contact)

    async def create_contact(
        self,
        *,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        company: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Contact:
        """
        Create a contact added by hand.

        Empty optional values are stored as NULL.
        """
        contact = Contact(
            id=generate_prefixed_id(IDPrefix.CONTACT),
            name=name,
            email=email or None,
            phone=phone or None,
            company=company or None,
            designation=designation or None,
        )
        self.session.add(contact)
        await self.session.commit()
        await self.session.refresh(contact)
        return contact

    async def find_by_email_or_phone(
        self,
        email: Optional[str] = None,
        phone: Optional[str] = None
    ) -> Optional[Contact]:
        """
        Find a contact sharing a non-empty email or phone.

        Args:
            email: Email to match
            phone: Phone to match

        Returns:
            Contact: First matching contact or None
        """
        conditions = []
        if email:
            conditions.append(Contact.email == email)
        if phone:
            conditions.append(Contact.phone == phone)
        if not conditions:
            return None

        result = await self.session.execute(
            select(Contact).where(or_(*conditions)).order_by(Contact.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    async def find_existing_values(
        self,
        emails: Iterable[str],
        phones: Iterable[str],
        batch_size: int
    ) -> Set[str]:
        """
        Return which of the given emails and phones already belong to a contact.

        The IN-clause is split into batches of ``batch_size`` values so a large
        upload never exceeds the engine's bound-parameter ceiling.

        Args:
            emails: Candidate emails
            phones: Candidate phones
            batch_size: Maximum values per query

        Returns:
            Set[str]: Stored values found among the candidates
        """
        known: Set[str] = set()

        for column, values in ((Contact.email, emails), (Contact.phone, phones)):
            unique = list(dict.fromkeys(v for v in values if v))
            for batch in chunked(unique, batch_size):
                result = await self.session.execute(select(column).where(column.in_(batch)))
                known.update(value for value in result.scalars().all() if value)

        logger.debug(f"Duplicate lookup matched {len(known)} stored values")
        return known

    async def get_by_import_id(self, import_id: str) -> List[Contact]:
        """
        Get contacts attributed to an import, newest first.

        Args:
            import_id: Import manifest ID

        Returns:
            List[Contact]: Contacts from that upload
        """
        result = await self.session.execute(
            select(Contact)
            .where(Contact.import_id == import_id)
            .order_by(desc(Contact.created_at))
        )
        return list(result.scalars().all())

    async def get_latest_logs(
        self,
        contact_ids: Sequence[str],
        batch_size: int = DEFAULT_LOOKUP_BATCH_SIZE
    ) -> Dict[str, ContactLog]:
        """
        Get the most recent log for each contact.

        Args:
            contact_ids: Contacts to look up
            batch_size: Maximum IDs per query

        Returns:
            Dict[str, ContactLog]: Latest log keyed by contact ID
        """
        latest: Dict[str, ContactLog] = {}
        for batch in chunked(list(contact_ids), batch_size):
            result = await self.session.execute(
                select(ContactLog)
                .where(ContactLog.contact_id.in_(batch))
                .order_by(desc(ContactLog.contacted_at))
            )
            for log in result.scalars().all():
                latest.setdefault(log.contact_id, log)
        return latest

    async def delete_contacts(self, contact_ids: Sequence[str]) -> int:
        """
        Delete contacts together with their logs and requirements.

        Does not commit; callers own the transaction.

        Args:
            contact_ids: Contacts to delete

        Returns:
            int: Number of contacts deleted
        """
        deleted = 0
        for batch in chunked(list(contact_ids), DEFAULT_LOOKUP_BATCH_SIZE):
            await self.session.execute(delete(ContactLog).where(ContactLog.contact_id.in_(batch)))
            await self.session.execute(delete(Requirement).where(Requirement.contact_id.in_(batch)))
            result = await self.session.execute(delete(Contact).where(Contact.id.in_(batch)))
            deleted += result.rowcount or 0
        return deleted

    async def clear_all(self) -> None:
        """Delete every log, requirement and contact. Does not commit."""
        await self.session.execute(delete(ContactLog))
        await self.session.execute(delete(Requirement))
        await self.session.execute(delete(Contact))
        logger.warning("All contacts, logs and requirements deleted")

