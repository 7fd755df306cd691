"""
Database model for contacts.
"""
from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship

from tracker.models.base import Base


class Contact(Base):
    """A person reached out to, added by hand or by a spreadsheet import."""

    name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=True, index=True)
    company = Column(String, nullable=True)
    designation = Column(String, nullable=True)

    # Set when the contact was accepted from a spreadsheet upload
    import_id = Column(String, ForeignKey("importrecord.id", ondelete="CASCADE"), nullable=True, index=True)

    # Relationships
    import_record = relationship("ImportRecord", back_populates="contacts")
    logs = relationship(
        "ContactLog",
        back_populates="contact",
        cascade="all, delete-orphan",
        order_by="desc(ContactLog.contacted_at)",
    )
    requirements = relationship("Requirement", back_populates="contact", cascade="all, delete-orphan")

    @property
    def added_at(self):
        return self.created_at
