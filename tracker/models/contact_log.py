"""
Database model for outreach attempts and their follow-ups.
"""
from enum import Enum

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from tracker.models.base import Base
from tracker.utils.datetime import utc_now


class LogResponse(str, Enum):
    """How a contact answered an outreach attempt."""
    PENDING = "pending"
    YES = "yes"
    NO = "no"


class ContactLog(Base):
    """One outreach event against a contact."""

    contact_id = Column(String, ForeignKey("contact.id", ondelete="CASCADE"), nullable=False, index=True)
    contacted_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    contacted_by = Column(String, nullable=True)
    response = Column(String, default=LogResponse.PENDING.value, nullable=False)
    follow_up_date = Column(Date, nullable=True, index=True)
    notes = Column(Text, nullable=True)

    # Follow-up completion is tracked separately from the response
    follow_up_completed = Column(Boolean, default=False, nullable=False)
    follow_up_completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    contact = relationship("Contact", back_populates="logs")
