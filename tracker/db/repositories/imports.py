"""
Import repository for spreadsheet import manifests.
"""
import logging
from typing import List, Tuple

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.repositories.base import BaseRepository
from tracker.db.repositories.contacts import ContactRepository
from tracker.models.contact import Contact
from tracker.models.import_record import ImportRecord
from tracker.schemas.import_record import ImportRecordCreate, ImportRecordUpdate
from tracker.utils.ids import generate_prefixed_id, IDPrefix

logger = logging.getLogger("tracker.db")


class ImportRepository(BaseRepository[ImportRecord, ImportRecordCreate, ImportRecordUpdate]):
    """ImportRecord repository for database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session and ImportRecord model."""
        super().__init__(session=session, model=ImportRecord)

    async def add_manifest(self, filename: str) -> ImportRecord:
        """
        Insert a manifest with zero counts and flush it.

        Does not commit; the import writer owns the transaction.

        Args:
            filename: Original upload filename

        Returns:
            ImportRecord: Pending manifest
        """
        manifest = ImportRecord(
            id=generate_prefixed_id(IDPrefix.IMPORT),
            filename=filename,
            added_count=0,
            skipped_count=0,
        )
        self.session.add(manifest)
        await self.session.flush()
        return manifest

    async def set_counts(self, manifest: ImportRecord, added: int, skipped: int) -> None:
        """Write final counts onto a pending manifest. Does not commit."""
        manifest.added_count = added
        manifest.skipped_count = skipped
        await self.session.flush()

    async def list_with_contact_counts(self) -> List[Tuple[ImportRecord, int]]:
        """
        Get all manifests, newest first, with the number of contacts still attributed to each.

        Returns:
            List[Tuple[ImportRecord, int]]: Manifests with contact counts
        """
        result = await self.session.execute(
            select(ImportRecord, func.count(Contact.id))
            .outerjoin(Contact, Contact.import_id == ImportRecord.id)
            .group_by(ImportRecord.id)
            .order_by(desc(ImportRecord.created_at))
        )
        return [(record, count) for record, count in result.all()]

    async def delete_import(self, import_id: str) -> int:
        """
        Delete an import with its contacts and their logs and requirements.

        Args:
            import_id: Import manifest ID

        Returns:
            int: Number of contacts deleted
        """
        contact_repo = ContactRepository(self.session)
        contact_ids = [contact.id for contact in await contact_repo.get_by_import_id(import_id)]

        deleted = await contact_repo.delete_contacts(contact_ids)
        await self.session.execute(delete(ImportRecord).where(ImportRecord.id == import_id))
        await self.session.commit()

        logger.info(f"Deleted import {import_id} and {deleted} contacts")
        return deleted

    async def clear_all(self) -> None:
        """Delete every manifest. Does not commit."""
        await self.session.execute(delete(ImportRecord))
