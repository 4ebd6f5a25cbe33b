"""Audit log entry domain model."""

from datetime import datetime


class AuditEntry:
    """
    Immutable record of a security-relevant account event.

    Attributes:
        id: Insertion sequence number
        user_id: Soft reference to a User
        event_time: Server-assigned timestamp
        event: Free-text description
    """

    __slots__ = ("id", "user_id", "event_time", "event")

    def __init__(self, id: int, user_id: str, event_time: datetime, event: str):
        self.id = id
        self.user_id = user_id
        self.event_time = event_time
        self.event = event

    def __repr__(self) -> str:
        return f"<AuditEntry id={self.id} user_id={self.user_id} event={self.event!r}>"
