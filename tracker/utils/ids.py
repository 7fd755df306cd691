# tracker/utils/ids.py

from enum import Enum
from uuid import uuid4

class IDPrefix(str, Enum):
    CONTACT = "contact"
    LOG = "log"
    REQUIREMENT = "req"
    IMPORT = "import"
    USER = "user"
    ACTIVITY = "activity"
    AUDIT = "audit"

def generate_prefixed_id(prefix: IDPrefix) -> str:
    """
    Generate a UUID string with a prefix.

    Args:
        prefix (IDPrefix): The entity prefix (e.g., CONTACT, IMPORT).

    Returns:
        str: A prefixed UUID string like 'contact-xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx'
    """
    return f"{prefix.value}-{uuid4()}"
