"""
Pydantic schemas for job requirements.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequirementBase(BaseModel):
    """Base requirement schema."""
    role: str = Field(..., min_length=1, description="Role title")
    experience: Optional[str] = Field(None, description="Experience band, e.g. 3-5 years")
    skills: Optional[str] = Field(None, description="Required skills")
    openings: int = Field(0, ge=0, description="Number of openings")
    description: Optional[str] = Field(None, description="Free-text description")

    @field_validator("role", "experience", "skills", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("openings", mode="before")
    @classmethod
    def default_openings(cls, v):
        """Missing or blank openings count as zero."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return v


class RequirementCreate(RequirementBase):
    """Schema for creating a requirement."""
    contact_id: str = Field(..., min_length=1, description="Contact reporting the opening")


class RequirementUpdate(BaseModel):
    """Schema for updating a requirement."""
    role: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[str] = None
    openings: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None


class RequirementResponse(RequirementBase):
    """Schema for requirement response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    contact_id: str
    created_at: datetime


class RequirementWithContact(RequirementResponse):
    """Requirement joined with its contact's details."""
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    company: Optional[str] = None
    designation: Optional[str] = None
