"""
Pydantic schemas for spreadsheet imports.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImportRecordCreate(BaseModel):
    """Schema for creating an import manifest."""
    filename: Optional[str] = Field(None, description="Original filename")


class ImportRecordUpdate(BaseModel):
    """Schema for updating an import manifest."""
    added_count: Optional[int] = Field(None, ge=0)
    skipped_count: Optional[int] = Field(None, ge=0)


class ImportRecordResponse(BaseModel):
    """Schema for import manifest response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    filename: Optional[str] = None
    imported_at: datetime
    added_count: int
    skipped_count: int
    contact_count: int = Field(0, description="Contacts still attributed to this import")


class ImportSummary(BaseModel):
    """Result of one spreadsheet upload."""
    added: int = Field(0, description="Contacts inserted")
    skipped: int = Field(0, description="Rows skipped as duplicates")
    errors: List[str] = Field(default_factory=list, description="Per-row failures, e.g. 'Row 7: ...'")


class ImportDeleteResponse(BaseModel):
    """Result of deleting an import."""
    message: str
    deleted_contacts: int
