"""
Requirement repository for job openings reported by contacts.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.repositories.base import BaseRepository
from tracker.models.contact import Contact
from tracker.models.requirement import Requirement
from tracker.schemas.requirement import RequirementCreate, RequirementUpdate
from tracker.utils.ids import generate_prefixed_id, IDPrefix

logger = logging.getLogger("tracker.db")


class RequirementRepository(BaseRepository[Requirement, RequirementCreate, RequirementUpdate]):
    """Requirement repository for database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session and Requirement model."""
        super().__init__(session=session, model=Requirement)

    async def create_requirement(self, data: RequirementCreate) -> Requirement:
        """
        Create a requirement for an existing contact.

        Args:
            data: Requirement fields

        Returns:
            Requirement: Created requirement
        """
        requirement = Requirement(
            id=generate_prefixed_id(IDPrefix.REQUIREMENT),
            contact_id=data.contact_id,
            role=data.role,
            experience=data.experience or None,
            skills=data.skills or None,
            openings=data.openings or 0,
            description=data.description or None,
        )
        self.session.add(requirement)
        await self.session.commit()
        await self.session.refresh(requirement)
        return requirement

    async def list_with_contacts(
        self,
        contact_id: Optional[str] = None
    ) -> List[Tuple[Requirement, Optional[Contact]]]:
        """
        Get requirements newest first, each with its contact (if it still exists).

        Args:
            contact_id: Optional contact filter

        Returns:
            List[Tuple[Requirement, Optional[Contact]]]: Requirements with contacts
        """
        query = (
            select(Requirement, Contact)
            .outerjoin(Contact, Contact.id == Requirement.contact_id)
            .order_by(desc(Requirement.created_at))
        )
        if contact_id:
            query = query.where(Requirement.contact_id == contact_id)

        result = await self.session.execute(query)
        return [(requirement, contact) for requirement, contact in result.all()]

    async def clear_all(self) -> int:
        """Delete every requirement."""
        result = await self.session.execute(delete(Requirement))
        await self.session.commit()
        deleted = result.rowcount or 0
        logger.warning(f"Deleted all {deleted} requirements")
        return deleted
