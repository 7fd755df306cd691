"""
Column detection for contact spreadsheets.

A sheet is mapped onto the five contact fields in three steps:

1. Header sniffing. Each of the first rows is normalised cell by cell and
   matched against an ordered list of header patterns. The first row that
   names at least two different fields is the header row and data starts
   on the row below it.
2. Content sniffing. Without a header row, the first data rows are
   inspected for cells shaped like an email, a phone number or a name.
3. Positional defaults for anything still unassigned.
"""
import logging
import re
from dataclasses import dataclass, fields
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple

from tracker.services.imports.workbook import Row, cell_text

logger = logging.getLogger("tracker.imports")

FIELD_NAMES = ("name", "email", "phone", "company", "designation")

DEFAULT_HEADER_SCAN_ROWS = 10
DEFAULT_CONTENT_SCAN_ROWS = 5
CONTENT_SCAN_COLUMNS = 6
MIN_HEADER_FIELDS = 2

_SEPARATORS_RGX = re.compile(r"[\s_\-.]+")

# Order matters: a header is assigned to the first family it matches
HEADER_MATCHERS: List[Tuple[str, Pattern]] = [
    ("name", re.compile(r"^(name|fullname|contactname|personname|employeename)")),
    ("email", re.compile(r"(email|mail|emailid|emailaddress|e?mail)")),
    ("phone", re.compile(r"(phone|mobile|contact|number|phonenumber|mobilenumber|contactnumber|telephone|cell)")),
    ("company", re.compile(r"(company|organization|org|employer|business)")),
    ("designation", re.compile(r"(designation|role|title|position|jobtitle)")),
]

_PHONE_VALUE_RGX = re.compile(r"^[\d\s\-+()]{8,}$")
_DIGIT_RUN_RGX = re.compile(r"[@\d]{3,}")


def _looks_like_email(value: str) -> bool:
    return "@" in value and "." in value


def _looks_like_phone(value: str) -> bool:
    return bool(_PHONE_VALUE_RGX.match(value))


def _looks_like_name(value: str) -> bool:
    return len(value) > 2 and not _DIGIT_RUN_RGX.search(value)


# Evaluated in order; the first unassigned field whose matcher accepts a cell claims it
CONTENT_MATCHERS: List[Tuple[str, Callable[[str], bool]]] = [
    ("email", _looks_like_email),
    ("phone", _looks_like_phone),
    ("name", _looks_like_name),
]

POSITIONAL_DEFAULTS: Dict[str, int] = {
    "name": 1,
    "email": 2,
    "phone": 3,
    "company": 4,
    "designation": 5,
}


@dataclass(frozen=True)
class FieldMap:
    """1-based worksheet column for each contact field."""
    name: int
    email: int
    phone: int
    company: int
    designation: int

    def as_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ColumnDetection:
    """Outcome of column detection for one worksheet."""
    field_map: FieldMap
    data_start_row: int
    header_row: Optional[int] = None
    method: str = "positional"


def normalize_header(value) -> str:
    """Lowercase a header cell and drop whitespace, underscores, hyphens and dots."""
    return _SEPARATORS_RGX.sub("", cell_text(value).lower())


def match_header(normalized: str) -> Optional[str]:
    """Return the field a normalised header names, if any."""
    if not normalized:
        return None
    for field_name, pattern in HEADER_MATCHERS:
        if pattern.search(normalized):
            return field_name
    return None


def _match_content(value: str, assigned: Dict[str, int]) -> Optional[str]:
    for field_name, matcher in CONTENT_MATCHERS:
        # Fields already found are passed over, so a cell may fall through to a later matcher
        if field_name not in assigned and matcher(value):
            return field_name
    return None


def _find_header_row(rows: Sequence[Row], scan_rows: int) -> Optional[Tuple[int, Dict[str, int]]]:
    for row_number, row in enumerate(rows[:scan_rows], start=1):
        found: Dict[str, int] = {}
        for column, value in enumerate(row, start=1):
            field_name = match_header(normalize_header(value))
            if field_name and field_name not in found:
                found[field_name] = column

        if len(found) >= MIN_HEADER_FIELDS:
            return row_number, found
    return None


def _sniff_content(rows: Sequence[Row], scan_rows: int) -> Dict[str, int]:
    found: Dict[str, int] = {}
    for row in rows[:scan_rows]:
        for column, value in enumerate(row[:CONTENT_SCAN_COLUMNS], start=1):
            text = cell_text(value)
            if not text:
                continue
            field_name = _match_content(text, found)
            if field_name:
                found[field_name] = column

        if all(key in found for key in ("name", "email", "phone")):
            break
    return found


def classify(
    rows: Sequence[Row],
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS,
    content_scan_rows: int = DEFAULT_CONTENT_SCAN_ROWS
) -> ColumnDetection:
    """
    Work out which column holds each contact field and where data starts.

    Args:
        rows: Worksheet rows as raw cell values
        header_scan_rows: How many leading rows may hold the header
        content_scan_rows: How many leading rows to sniff without a header

    Returns:
        ColumnDetection: Field map, first data row and the header row if one was found
    """
    header = _find_header_row(rows, header_scan_rows)
    if header:
        header_row, found = header
        data_start_row = header_row + 1
        method = "header"
    else:
        header_row = None
        found = _sniff_content(rows, content_scan_rows)
        data_start_row = 1
        method = "content" if found else "positional"

    mapping = {name: found.get(name, POSITIONAL_DEFAULTS[name]) for name in FIELD_NAMES}
    detection = ColumnDetection(
        field_map=FieldMap(**mapping),
        data_start_row=data_start_row,
        header_row=header_row,
        method=method,
    )

    logger.info(
        f"Column detection by {method}: header row {header_row}, "
        f"data starts at row {data_start_row}, map {mapping}"
    )
    return detection
