"""
Pydantic schemas for outreach logs and follow-ups.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tracker.models.contact_log import LogResponse


class ContactLogCreate(BaseModel):
    """Schema for recording an outreach attempt."""
    contacted_by: Optional[str] = Field(None, description="Who made contact (defaults to the current user)")
    response: LogResponse = Field(LogResponse.PENDING, description="Contact's response")
    follow_up_date: Optional[date] = Field(None, description="Date to follow up on")
    notes: Optional[str] = Field(None, description="Free-text notes")

    @field_validator("contacted_by", "notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim text and treat blanks as missing."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("follow_up_date", mode="before")
    @classmethod
    def blank_date(cls, v):
        """Forms send an empty string when no date is picked."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ContactLogUpdate(BaseModel):
    """Schema for updating a log; only follow-up completion is mutable."""
    follow_up_completed: Optional[bool] = None


class ContactLogResponse(BaseModel):
    """Schema for log response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    contact_id: str
    contacted_at: datetime
    contacted_by: Optional[str] = None
    response: LogResponse
    follow_up_date: Optional[date] = None
    notes: Optional[str] = None
    follow_up_completed: bool = False
    follow_up_completed_at: Optional[datetime] = None


class FollowUpResponse(ContactLogResponse):
    """An open follow-up together with the contact it concerns."""
    name: str = Field(..., description="Contact name")
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    designation: Optional[str] = None
