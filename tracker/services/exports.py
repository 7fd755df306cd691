"""
Excel exports of contacts and requirements.
"""
from io import BytesIO
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font

from tracker.models.contact import Contact
from tracker.models.contact_log import ContactLog
from tracker.models.requirement import Requirement
from tracker.utils.datetime import format_datetime

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, width)
CONTACT_COLUMNS: List[Tuple[str, int]] = [
    ("Name", 24),
    ("Email", 28),
    ("Phone", 16),
    ("Company", 20),
    ("Designation", 20),
    ("Added At", 22),
    ("Last Contacted", 22),
    ("Contacted By", 18),
    ("Response", 10),
    ("Follow Up Date", 14),
    ("Notes", 40),
]

REQUIREMENT_COLUMNS: List[Tuple[str, int]] = [
    ("Requirement ID", 36),
    ("Contact Name", 24),
    ("Email", 24),
    ("Phone", 16),
    ("Company", 20),
    ("Designation", 20),
    ("Role", 20),
    ("Experience", 12),
    ("Skills", 40),
    ("Openings", 10),
    ("Description", 50),
    ("Created At", 24),
]


def _build(title: str, columns: Sequence[Tuple[str, int]], rows: Iterable[Sequence[Any]]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title

    sheet.append([header for header, _ in columns])
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for index, (_, width) in enumerate(columns, start=1):
        sheet.column_dimensions[sheet.cell(row=1, column=index).column_letter].width = width
    sheet.freeze_panes = "A2"

    for row in rows:
        sheet.append(list(row))

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def build_contacts_workbook(contacts: Iterable[Tuple[Contact, Optional[ContactLog]]]) -> bytes:
    """
    Contacts with their latest outreach status as .xlsx bytes.

    Args:
        contacts: Each contact paired with its latest log, or None
    """
    def rows():
        for contact, log in contacts:
            yield [
                contact.name,
                contact.email or "",
                contact.phone or "",
                contact.company or "",
                contact.designation or "",
                format_datetime(contact.created_at),
                format_datetime(log.contacted_at) if log else "",
                (log.contacted_by or "") if log else "",
                log.response if log else "",
                log.follow_up_date.isoformat() if log and log.follow_up_date else "",
                (log.notes or "") if log else "",
            ]

    return _build("Contacts", CONTACT_COLUMNS, rows())


def build_requirements_workbook(requirements: Iterable[Tuple[Requirement, Optional[Contact]]]) -> bytes:
    """
    Requirements joined with their contacts as .xlsx bytes.

    Args:
        requirements: Each requirement paired with its contact, or None
    """
    def rows():
        for requirement, contact in requirements:
            yield [
                requirement.id,
                contact.name if contact else "",
                (contact.email or "") if contact else "",
                (contact.phone or "") if contact else "",
                (contact.company or "") if contact else "",
                (contact.designation or "") if contact else "",
                requirement.role,
                requirement.experience or "",
                requirement.skills or "",
                requirement.openings,
                requirement.description or "",
                format_datetime(requirement.created_at),
            ]

    return _build("Requirements", REQUIREMENT_COLUMNS, rows())
