"""
Reading uploaded spreadsheets into plain rows.
"""
import logging
import zipfile
from typing import Any, List, Tuple

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from tracker.core.exceptions import ValidationError

logger = logging.getLogger("tracker.imports")

Row = Tuple[Any, ...]


def load_rows(path: str) -> List[Row]:
    """
    Read every row of the first worksheet as raw cell values.

    The workbook is opened read-only and closed before returning so the
    file handle is released before the upload is cleaned up.

    Args:
        path: Path to an .xlsx/.xlsm file

    Returns:
        List[Row]: Rows in sheet order; row N of the sheet is ``rows[N - 1]``

    Raises:
        ValidationError: If the file is not a readable workbook
    """
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        logger.warning(f"Rejected unreadable workbook {path}: {str(e)}")
        raise ValidationError(
            message="Uploaded file is not a readable Excel workbook",
            details={"reason": str(e)}
        )

    try:
        worksheet = workbook.worksheets[0]
        # Some writers store a wrong <dimension>, which would cut rows short
        worksheet.reset_dimensions()
        rows = [tuple(row) for row in worksheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

    logger.debug(f"Read {len(rows)} rows from {path}")
    return rows


def cell_text(value: Any) -> str:
    """
    Render a cell value as trimmed text.

    Empty cells become "" and whole-number floats lose their ".0", so a
    phone typed as a number reads back the way it was entered.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def row_cell(row: Row, column: int) -> str:
    """Text of a 1-based column, "" when the row is shorter."""
    if column < 1 or column > len(row):
        return ""
    return cell_text(row[column - 1])
