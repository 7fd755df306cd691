"""
Import Service - runs one spreadsheet upload from file to committed rows.

Detection and extraction happen outside any transaction. The duplicate
lookup, reconciliation and all writes then run inside a single transaction
that either commits the manifest with its contacts or leaves nothing behind.
"""
import asyncio
import logging
import weakref
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from tracker.core.config import settings
from tracker.core.exceptions import ImportFailedError, TrackerException
from tracker.db.repositories.contacts import ContactRepository
from tracker.db.session import async_session_factory
from tracker.schemas.import_record import ImportSummary
from tracker.services.imports.classifier import classify
from tracker.services.imports.extractor import extract
from tracker.services.imports.reconciler import MembershipSet, lookup_values, reconcile
from tracker.services.imports.workbook import load_rows
from tracker.services.imports.writer import ImportWriter

logger = logging.getLogger("tracker.imports")

# Serialises lookup-then-write across imports running on the same event loop
_import_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = weakref.WeakKeyDictionary()


def _import_lock() -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    lock = _import_locks.get(loop)
    if lock is None:
        lock = _import_locks[loop] = asyncio.Lock()
    return lock


class ImportService:
    """
    Orchestrates classify, extract, reconcile and persist for one upload.

    The service owns its database session so the import transaction is
    never mixed with other work done by the request.
    """

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        lookup_batch_size: Optional[int] = None,
        header_scan_rows: Optional[int] = None,
        content_scan_rows: Optional[int] = None
    ):
        self.session_factory = session_factory or async_session_factory
        self.lookup_batch_size = lookup_batch_size or settings.IMPORT_LOOKUP_BATCH_SIZE
        self.header_scan_rows = header_scan_rows or settings.IMPORT_HEADER_SCAN_ROWS
        self.content_scan_rows = content_scan_rows or settings.IMPORT_CONTENT_SCAN_ROWS
        self.import_id: Optional[str] = None

    async def run(self, path: str, filename: str) -> ImportSummary:
        """
        Import contacts from a workbook on disk.

        Args:
            path: Path to the uploaded workbook
            filename: Original upload filename, stored on the manifest

        Returns:
            ImportSummary: Added and skipped counts with per-row errors

        Raises:
            ValidationError: If the file cannot be read as a workbook
            ImportFailedError: If the transaction fails and is rolled back
        """
        rows = await run_in_threadpool(load_rows, path)
        detection = classify(rows, self.header_scan_rows, self.content_scan_rows)
        candidates = extract(rows, detection)
        logger.info(f"Import of {filename}: {len(candidates)} candidate rows")

        async with _import_lock():
            try:
                async with self.session_factory() as session:
                    async with session.begin():
                        summary = await self._reconcile_and_persist(session, filename, candidates)
            except TrackerException:
                raise
            except Exception as e:
                logger.error(f"Import of {filename} rolled back: {str(e)}")
                raise ImportFailedError(
                    message=f"Import failed: {str(e)}",
                    details={"filename": filename}
                ) from e

        logger.info(
            f"Import {self.import_id} committed: {summary.added} added, "
            f"{summary.skipped} skipped, {len(summary.errors)} errors"
        )
        return summary

    async def _reconcile_and_persist(self, session: AsyncSession, filename, candidates) -> ImportSummary:
        emails, phones = lookup_values(candidates)
        known = await ContactRepository(session).find_existing_values(
            emails, phones, self.lookup_batch_size
        )
        logger.info(
            f"Checked {len(emails)} emails and {len(phones)} phones, "
            f"{len(known)} already stored"
        )

        reconciliation = reconcile(candidates, MembershipSet(known))
        summary, manifest = await ImportWriter(session).persist(
            filename, reconciliation.accepted, reconciliation.skipped_count
        )
        self.import_id = manifest.id
        return summary
