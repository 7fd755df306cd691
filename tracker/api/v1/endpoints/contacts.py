"""
API endpoints for contacts, outreach logs, follow-ups and spreadsheet imports.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.api.v1.dependencies import get_current_user, require_admin
from tracker.core.exceptions import BadRequestError, NotFoundError
from tracker.db.repositories.contact_logs import ContactLogRepository
from tracker.db.repositories.contacts import ContactRepository
from tracker.db.repositories.imports import ImportRepository
from tracker.db.repositories.requirements import RequirementRepository
from tracker.db.session import get_db
from tracker.models.contact import Contact
from tracker.models.contact_log import ContactLog
from tracker.schemas.contact import (
    ContactCount,
    ContactCreate,
    ContactCreateResult,
    ContactDetail,
    ContactResponse,
    ContactWithLatestLog,
)
from tracker.schemas.contact_log import ContactLogCreate, ContactLogResponse, FollowUpResponse
from tracker.schemas.import_record import ImportDeleteResponse, ImportRecordResponse, ImportSummary
from tracker.schemas.requirement import RequirementResponse
from tracker.schemas.user import CurrentUser, MessageResponse
from tracker.services.activity import ActivityType, log_activity
from tracker.services.exports import XLSX_MEDIA_TYPE, build_contacts_workbook
from tracker.services.imports.service import ImportService
from tracker.services.imports.uploads import schedule_cleanup, store_upload, validate_filename
from tracker.utils.datetime import utc_today

router = APIRouter()
logger = logging.getLogger("tracker.contacts")


def _with_latest_log(contact: Contact, log: Optional[ContactLog]) -> ContactWithLatestLog:
    return ContactWithLatestLog(
        **ContactResponse.model_validate(contact).model_dump(),
        latest_log=ContactLogResponse.model_validate(log) if log else None,
    )


def _followup(log: ContactLog, contact: Contact) -> FollowUpResponse:
    return FollowUpResponse(
        **ContactLogResponse.model_validate(log).model_dump(),
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        company=contact.company,
        designation=contact.designation,
    )


@router.post("/", response_model=ContactCreateResult)
async def create_contact(
    contact_data: ContactCreate,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Add a contact by hand.

    When another contact already has the same email or phone, that contact
    is returned with ``existing: true`` and nothing is inserted.
    """
    if not contact_data.name:
        raise BadRequestError("Name is required")
    if not contact_data.email and not contact_data.phone:
        raise BadRequestError("Either email or phone is required")

    contact_repo = ContactRepository(session)
    existing = await contact_repo.find_by_email_or_phone(contact_data.email, contact_data.phone)
    if existing:
        logger.info(f"Contact add matched existing contact {existing.id}")
        return ContactCreateResult(existing=True, contact=ContactResponse.model_validate(existing))

    contact = await contact_repo.create_contact(**contact_data.model_dump())
    await log_activity(
        session,
        current_user,
        ActivityType.CONTACT_CREATED,
        f"Created contact {contact.name}",
        contact_id=contact.id,
        contact_name=contact.name,
        metadata={"email": contact.email, "phone": contact.phone, "company": contact.company},
    )

    response.status_code = status.HTTP_201_CREATED
    return ContactCreateResult(existing=False, contact=ContactResponse.model_validate(contact))


@router.get("/", response_model=List[ContactWithLatestLog])
async def list_contacts(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    List all contacts, newest first, each with its latest outreach log.
    """
    contact_repo = ContactRepository(session)
    contacts = await contact_repo.list()
    latest = await contact_repo.get_latest_logs([c.id for c in contacts])
    return [_with_latest_log(contact, latest.get(contact.id)) for contact in contacts]


@router.get("/count", response_model=ContactCount)
async def count_contacts(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Total number of contacts."""
    return ContactCount(count=await ContactRepository(session).count())


@router.get("/export")
async def export_contacts(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Download all contacts with their latest status as an Excel workbook.
    """
    contact_repo = ContactRepository(session)
    contacts = await contact_repo.list()
    latest = await contact_repo.get_latest_logs([c.id for c in contacts])
    content = build_contacts_workbook((c, latest.get(c.id)) for c in contacts)

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=contacts.xlsx"},
    )


@router.get("/followups/pending", response_model=List[FollowUpResponse])
async def pending_followups(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Open follow-ups due today or earlier, earliest first.
    """
    rows = await ContactLogRepository(session).list_open_followups(due_on_or_before=utc_today())
    return [_followup(log, contact) for log, contact in rows]


@router.get("/followups/all", response_model=List[FollowUpResponse])
async def all_followups(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Every open follow-up, earliest first.
    """
    rows = await ContactLogRepository(session).list_open_followups()
    return [_followup(log, contact) for log, contact in rows]


@router.patch("/followups/{log_id}/complete", response_model=ContactLogResponse)
async def complete_followup(
    log_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Mark a follow-up as done.
    """
    log = await ContactLogRepository(session).complete_followup(log_id)
    if not log:
        raise NotFoundError(f"Log {log_id} not found")

    contact = await ContactRepository(session).get_by_id(log.contact_id)
    await log_activity(
        session,
        current_user,
        ActivityType.FOLLOWUP_COMPLETED,
        f"Completed follow-up for {contact.name if contact else log.contact_id}",
        contact_id=log.contact_id,
        contact_name=contact.name if contact else None,
        metadata={"log_id": log.id},
    )
    return log


@router.post("/import", response_model=ImportSummary)
async def import_contacts(
    file: UploadFile = File(..., description="Excel workbook (.xlsx) with contacts"),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Import contacts from an Excel workbook.

    Columns are detected from the header row (or from the cell contents when
    there is none). Rows whose email or phone already exists, in storage or
    earlier in the same file, are skipped. The whole import is committed or
    rolled back as one unit.
    """
    filename = validate_filename(file.filename)
    temp_path = await store_upload(file)

    service = ImportService()
    try:
        summary = await service.run(temp_path, filename)
    finally:
        schedule_cleanup(temp_path)

    await log_activity(
        session,
        current_user,
        ActivityType.CONTACTS_IMPORTED,
        f"Imported {summary.added} contacts from {filename}",
        metadata={
            "import_id": service.import_id,
            "filename": filename,
            "added": summary.added,
            "skipped": summary.skipped,
            "errors": len(summary.errors),
        },
    )
    return summary


@router.get("/imports", response_model=List[ImportRecordResponse])
async def list_imports(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    List every import, newest first, with how many of its contacts remain.
    """
    rows = await ImportRepository(session).list_with_contact_counts()
    return [
        ImportRecordResponse.model_validate(record).model_copy(update={"contact_count": count})
        for record, count in rows
    ]


@router.get("/imports/{import_id}/contacts", response_model=List[ContactResponse])
async def list_import_contacts(
    import_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Contacts added by one import, newest first.
    """
    return await ContactRepository(session).get_by_import_id(import_id)


@router.delete("/imports/{import_id}", response_model=ImportDeleteResponse)
async def delete_import(
    import_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Delete an import together with its contacts and their logs and requirements.
    """
    import_repo = ImportRepository(session)
    record = await import_repo.get_by_id(import_id)
    if not record:
        raise NotFoundError(f"Import {import_id} not found")

    filename = record.filename
    deleted = await import_repo.delete_import(import_id)
    await log_activity(
        session,
        current_user,
        ActivityType.IMPORT_DELETED,
        f"Deleted import {filename} and {deleted} contacts",
        metadata={"import_id": import_id, "filename": filename, "deleted_contacts": deleted},
    )
    return ImportDeleteResponse(
        message=f"Import and {deleted} contacts deleted successfully",
        deleted_contacts=deleted,
    )


@router.delete("/clear-all", response_model=MessageResponse)
async def clear_all_contacts(
    current_user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Delete every contact, log, requirement and import. Admins only.
    """
    total = await ContactRepository(session).count()
    await ContactRepository(session).clear_all()
    await ImportRepository(session).clear_all()
    await session.commit()

    await log_activity(
        session,
        current_user,
        ActivityType.CONTACTS_CLEARED,
        f"Cleared all data ({total} contacts)",
        metadata={"deleted_contacts": total},
    )
    return MessageResponse(message="All contacts, logs, requirements, and imports cleared")


@router.delete("/requirements/clear-all", response_model=MessageResponse)
async def clear_all_requirements(
    current_user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Delete every requirement. Admins only.
    """
    deleted = await RequirementRepository(session).clear_all()
    await log_activity(
        session,
        current_user,
        ActivityType.REQUIREMENTS_CLEARED,
        f"Cleared all requirements ({deleted})",
        metadata={"deleted_requirements": deleted},
    )
    return MessageResponse(message="All requirements cleared")


@router.delete("/requirements/{requirement_id}", response_model=MessageResponse)
async def delete_requirement(
    requirement_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Delete one requirement.
    """
    requirement_repo = RequirementRepository(session)
    requirement = await requirement_repo.get_by_id(requirement_id)
    if not requirement:
        raise NotFoundError(f"Requirement {requirement_id} not found")

    role, contact_id = requirement.role, requirement.contact_id
    await requirement_repo.delete(id=requirement_id)
    await log_activity(
        session,
        current_user,
        ActivityType.REQUIREMENT_DELETED,
        f"Deleted requirement {role}",
        contact_id=contact_id,
        metadata={"requirement_id": requirement_id},
    )
    return MessageResponse(message="Requirement deleted")


@router.get("/{contact_id}", response_model=ContactDetail)
async def get_contact(
    contact_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    A contact with its outreach history (newest first) and requirements.
    """
    contact = await ContactRepository(session).get_by_id(contact_id)
    if not contact:
        raise NotFoundError(f"Contact {contact_id} not found")

    logs = await ContactLogRepository(session).list_for_contact(contact_id)
    requirements = await RequirementRepository(session).list(filters={"contact_id": contact_id})
    return ContactDetail(
        **ContactResponse.model_validate(contact).model_dump(),
        logs=[ContactLogResponse.model_validate(log) for log in logs],
        requirements=[RequirementResponse.model_validate(r) for r in requirements],
    )


@router.post("/{contact_id}/log", response_model=ContactLogResponse, status_code=status.HTTP_201_CREATED)
async def log_contact(
    contact_id: str,
    log_data: ContactLogCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Record an outreach attempt against a contact.
    """
    contact = await ContactRepository(session).get_by_id(contact_id)
    if not contact:
        raise NotFoundError(f"Contact {contact_id} not found")

    log = await ContactLogRepository(session).create_log(
        contact_id=contact_id,
        contacted_by=log_data.contacted_by or current_user.name,
        response=log_data.response,
        follow_up_date=log_data.follow_up_date,
        notes=log_data.notes,
    )
    await log_activity(
        session,
        current_user,
        ActivityType.CONTACT_LOGGED,
        f"Logged contact with {contact.name}: {log.response}",
        contact_id=contact.id,
        contact_name=contact.name,
        metadata={
            "log_id": log.id,
            "response": log.response,
            "follow_up_date": log.follow_up_date.isoformat() if log.follow_up_date else None,
        },
    )
    return log
