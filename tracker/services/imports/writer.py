"""
Persisting reconciled rows and the import manifest.
"""
import logging
from typing import List, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.repositories.imports import ImportRepository
from tracker.models.contact import Contact
from tracker.models.import_record import ImportRecord
from tracker.schemas.import_record import ImportSummary
from tracker.services.imports.extractor import CandidateRow
from tracker.utils.ids import generate_prefixed_id, IDPrefix

logger = logging.getLogger("tracker.imports")


def _row_error(row: CandidateRow, error: SQLAlchemyError) -> str:
    reason = getattr(error, "orig", None) or error
    return f"Row {row.row_number}: {reason}"


class ImportWriter:
    """
    Writes one import inside the caller's transaction.

    The caller opens the transaction; the writer never commits. Each contact
    goes through its own SAVEPOINT so a failing row is rolled back alone and
    reported, while a failure on the manifest propagates and takes the whole
    import down with it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.import_repo = ImportRepository(session)

    async def persist(
        self,
        filename: str,
        accepted: Sequence[CandidateRow],
        skipped: int
    ) -> Tuple[ImportSummary, ImportRecord]:
        """
        Insert the manifest and the accepted contacts.

        Args:
            filename: Original upload filename
            accepted: Rows that passed reconciliation
            skipped: Number of rows skipped as duplicates

        Returns:
            Tuple[ImportSummary, ImportRecord]: Counts and row errors, and the manifest
        """
        manifest = await self.import_repo.add_manifest(filename)

        added = 0
        errors: List[str] = []
        for row in accepted:
            try:
                async with self.session.begin_nested():
                    self.session.add(self._build_contact(row, manifest.id))
                    await self.session.flush()
            except SQLAlchemyError as e:
                logger.warning(f"Import {manifest.id} row {row.row_number} rejected: {str(e)}")
                errors.append(_row_error(row, e))
                continue
            added += 1

        await self.import_repo.set_counts(manifest, added=added, skipped=skipped)

        logger.info(
            f"Import {manifest.id} staged: {added} added, {skipped} skipped, {len(errors)} errors"
        )
        return ImportSummary(added=added, skipped=skipped, errors=errors), manifest

    @staticmethod
    def _build_contact(row: CandidateRow, import_id: str) -> Contact:
        return Contact(
            id=generate_prefixed_id(IDPrefix.CONTACT),
            name=row.name,
            email=row.email or None,
            phone=row.phone or None,
            company=row.company or None,
            designation=row.designation or None,
            import_id=import_id,
        )
