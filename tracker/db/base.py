"""
Import all models here to ensure they are registered with SQLAlchemy.
"""
# Import Base
from tracker.models.base import Base

# Import all models
from tracker.models.user import User
from tracker.models.import_record import ImportRecord
from tracker.models.contact import Contact
from tracker.models.contact_log import ContactLog
from tracker.models.requirement import Requirement
from tracker.models.activity import ActivityLog, AuditLog
