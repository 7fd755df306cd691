"""
Pydantic schemas for contact-related API operations.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tracker.schemas.contact_log import ContactLogResponse
from tracker.schemas.requirement import RequirementResponse


class ContactBase(BaseModel):
    """Base contact schema."""
    name: Optional[str] = Field(None, description="Contact name")
    email: Optional[str] = Field(None, description="Email address")
    phone: Optional[str] = Field(None, description="Phone number")
    company: Optional[str] = Field(None, description="Company")
    designation: Optional[str] = Field(None, description="Job title")

    @field_validator("name", "email", "phone", "company", "designation", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim text and treat blanks as missing."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ContactCreate(ContactBase):
    """
    Schema for adding a contact by hand.

    Name and email/phone presence is checked by the endpoint so that a
    missing value is reported as a bad request.
    """


class ContactUpdate(ContactBase):
    """Schema for updating a contact."""


class ContactResponse(BaseModel):
    """Schema for contact response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    designation: Optional[str] = None
    import_id: Optional[str] = None
    added_at: datetime


class ContactWithLatestLog(ContactResponse):
    """Contact with the log that determines its displayed status."""
    latest_log: Optional[ContactLogResponse] = None


class ContactDetail(ContactResponse):
    """Contact with its full outreach history and requirements."""
    logs: List[ContactLogResponse] = Field(default_factory=list)
    requirements: List[RequirementResponse] = Field(default_factory=list)


class ContactCreateResult(BaseModel):
    """Outcome of a manual add; ``existing`` is true when a duplicate was found."""
    existing: bool
    contact: ContactResponse


class ContactCount(BaseModel):
    """Total number of contacts."""
    count: int
