"""Domain models for the credential store."""

from .audit_entry import AuditEntry
from .user import User

__all__ = [
    "AuditEntry",
    "User",
]
