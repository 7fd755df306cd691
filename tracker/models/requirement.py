"""
Database model for job requirements reported by contacts.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from tracker.models.base import Base


class Requirement(Base):
    """A job opening a contact told us about."""

    contact_id = Column(String, ForeignKey("contact.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=False)
    experience = Column(String, nullable=True)
    skills = Column(Text, nullable=True)
    openings = Column(Integer, default=0, nullable=False)
    description = Column(Text, nullable=True)

    # Relationships
    contact = relationship("Contact", back_populates="requirements")
