"""
Database models for the user activity trail and the admin audit trail.
"""
from sqlalchemy import Column, JSON, String, Text

from tracker.models.base import Base


class ActivityLog(Base):
    """A contact-related action performed by a user."""

    user_id = Column(String, nullable=True, index=True)
    user_name = Column(String, nullable=True)
    user_email = Column(String, nullable=True)
    action_type = Column(String, nullable=False, index=True)
    action_description = Column(Text, nullable=True)
    contact_id = Column(String, nullable=True)
    contact_name = Column(String, nullable=True)
    details = Column(JSON, nullable=True)


class AuditLog(Base):
    """An administrative change made to a user account."""

    admin_id = Column(String, nullable=True, index=True)
    admin_name = Column(String, nullable=True)
    admin_email = Column(String, nullable=True)
    admin_role = Column(String, nullable=True)
    action_type = Column(String, nullable=False, index=True)
    action_description = Column(Text, nullable=True)
    target_user_id = Column(String, nullable=True, index=True)
    target_user_name = Column(String, nullable=True)
    target_user_email = Column(String, nullable=True)
    old_value = Column(String, nullable=True)
    new_value = Column(String, nullable=True)
    details = Column(JSON, nullable=True)
