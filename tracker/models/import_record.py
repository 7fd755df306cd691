"""
Database model for spreadsheet import manifests.
"""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from tracker.models.base import Base


class ImportRecord(Base):
    """Manifest of one spreadsheet upload."""

    filename = Column(String, nullable=True)
    added_count = Column(Integer, default=0, nullable=False)
    skipped_count = Column(Integer, default=0, nullable=False)

    # Relationships
    contacts = relationship("Contact", back_populates="import_record", passive_deletes=True)

    @property
    def imported_at(self):
        return self.created_at
