"""
Temporary storage for uploaded spreadsheets.
"""
import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from tracker.core.config import settings
from tracker.core.exceptions import PayloadTooLargeError, ValidationError

logger = logging.getLogger("tracker.imports")

ALLOWED_EXTENSIONS = {".xlsx", ".xlsm"}
CHUNK_SIZE = 64 * 1024
TEMP_FILE_PREFIX = "tracker_import_"


def validate_filename(filename: Optional[str]) -> str:
    """
    Check an upload's name before anything is read.

    Raises:
        ValidationError: If the name is missing or not an Excel workbook
    """
    if not filename:
        raise ValidationError(message="No file uploaded")

    extension = Path(filename).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            message=f"File type '{extension or filename}' not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            details={"filename": filename}
        )
    return Path(filename).name


async def store_upload(file: UploadFile, max_size: Optional[int] = None) -> str:
    """
    Stream an upload to a temporary file.

    Args:
        file: Uploaded spreadsheet
        max_size: Byte limit (defaults to IMPORT_MAX_FILE_SIZE)

    Returns:
        str: Path of the temporary copy

    Raises:
        PayloadTooLargeError: If the upload exceeds the limit
    """
    limit = max_size or settings.IMPORT_MAX_FILE_SIZE
    suffix = Path(file.filename or "").suffix.lower()
    temp_fd, temp_path = tempfile.mkstemp(
        prefix=TEMP_FILE_PREFIX,
        suffix=suffix,
        dir=settings.IMPORT_TEMP_DIR
    )

    total_size = 0
    try:
        with os.fdopen(temp_fd, "wb") as temp_file:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > limit:
                    raise PayloadTooLargeError(
                        message=f"File size exceeds {limit // (1024 * 1024)}MB limit",
                        details={"max_bytes": limit}
                    )
                temp_file.write(chunk)
    except Exception:
        remove_temp_file(temp_path)
        raise

    logger.debug(f"Stored upload {file.filename} ({total_size} bytes) at {temp_path}")
    return temp_path


def remove_temp_file(temp_path: str) -> None:
    """Delete a temporary upload, logging rather than raising on failure."""
    try:
        if temp_path and os.path.exists(temp_path):
            os.unlink(temp_path)
            logger.debug(f"Cleaned up temporary file: {temp_path}")
    except OSError as e:
        logger.warning(f"Failed to clean up temp file {temp_path}: {str(e)}")


def schedule_cleanup(temp_path: str, delay: Optional[float] = None) -> None:
    """
    Remove a temporary upload shortly after processing.

    The delay leaves time for the workbook reader to release the file.
    """
    wait = settings.IMPORT_TEMP_CLEANUP_DELAY if delay is None else delay
    asyncio.get_running_loop().call_later(wait, remove_temp_file, temp_path)
