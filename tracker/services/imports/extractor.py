"""
Turning worksheet rows into candidate contacts.
"""
import logging
from dataclasses import dataclass
from typing import List, Sequence

from tracker.services.imports.classifier import ColumnDetection
from tracker.services.imports.workbook import Row, row_cell

logger = logging.getLogger("tracker.imports")


@dataclass(frozen=True)
class CandidateRow:
    """One spreadsheet row read through the detected column map."""
    row_number: int
    name: str
    email: str
    phone: str
    company: str
    designation: str

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.email or self.phone)

    @property
    def is_reachable(self) -> bool:
        """At least one of email or phone is present."""
        return bool(self.email or self.phone)


def extract(rows: Sequence[Row], detection: ColumnDetection) -> List[CandidateRow]:
    """
    Read candidate contacts from every row at or below the data start row.

    Rows with no name, email or phone are dropped. Row numbers are the
    1-based sheet rows so errors can point back at the file.

    Args:
        rows: Worksheet rows as raw cell values
        detection: Column map and data start row

    Returns:
        List[CandidateRow]: Candidates in sheet order
    """
    field_map = detection.field_map
    candidates: List[CandidateRow] = []

    for row_number in range(detection.data_start_row, len(rows) + 1):
        row = rows[row_number - 1]
        candidate = CandidateRow(
            row_number=row_number,
            name=row_cell(row, field_map.name),
            email=row_cell(row, field_map.email),
            phone=row_cell(row, field_map.phone),
            company=row_cell(row, field_map.company),
            designation=row_cell(row, field_map.designation),
        )
        if candidate.is_empty:
            continue
        candidates.append(candidate)

    logger.debug(f"Extracted {len(candidates)} candidate rows")
    return candidates
