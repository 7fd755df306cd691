"""
API endpoints for job requirements reported by contacts.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.api.v1.dependencies import get_current_user
from tracker.core.exceptions import NotFoundError
from tracker.db.repositories.contacts import ContactRepository
from tracker.db.repositories.requirements import RequirementRepository
from tracker.db.session import get_db
from tracker.models.contact import Contact
from tracker.models.requirement import Requirement
from tracker.schemas.requirement import RequirementCreate, RequirementResponse, RequirementWithContact
from tracker.schemas.user import CurrentUser
from tracker.services.activity import ActivityType, log_activity
from tracker.services.exports import XLSX_MEDIA_TYPE, build_requirements_workbook

router = APIRouter()
logger = logging.getLogger("tracker.requirements")


def _with_contact(requirement: Requirement, contact: Optional[Contact]) -> RequirementWithContact:
    return RequirementWithContact(
        **RequirementResponse.model_validate(requirement).model_dump(),
        contact_name=contact.name if contact else None,
        contact_email=contact.email if contact else None,
        contact_phone=contact.phone if contact else None,
        company=contact.company if contact else None,
        designation=contact.designation if contact else None,
    )


@router.get("/", response_model=List[RequirementWithContact])
async def list_requirements(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    List all requirements, newest first, with their contacts' details.
    """
    rows = await RequirementRepository(session).list_with_contacts()
    return [_with_contact(requirement, contact) for requirement, contact in rows]


@router.post("/", response_model=RequirementResponse, status_code=status.HTTP_201_CREATED)
async def create_requirement(
    requirement_data: RequirementCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Record a job opening reported by a contact.
    """
    contact = await ContactRepository(session).get_by_id(requirement_data.contact_id)
    if not contact:
        raise NotFoundError(f"Contact {requirement_data.contact_id} not found")

    requirement = await RequirementRepository(session).create_requirement(requirement_data)
    await log_activity(
        session,
        current_user,
        ActivityType.REQUIREMENT_CREATED,
        f"Added requirement {requirement.role} for {contact.name}",
        contact_id=contact.id,
        contact_name=contact.name,
        metadata={"requirement_id": requirement.id, "openings": requirement.openings},
    )
    return requirement


@router.get("/export")
async def export_requirements(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Download all requirements with their contacts as an Excel workbook.
    """
    rows = await RequirementRepository(session).list_with_contacts()
    return Response(
        content=build_requirements_workbook(rows),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=requirements.xlsx"},
    )
