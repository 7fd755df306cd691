"""
Database models for user management.
"""
from sqlalchemy import Boolean, Column, String

from tracker.models.base import Base


class User(Base):
    """User model for authentication and authorization."""

    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    role = Column(String, default="user", nullable=False)
