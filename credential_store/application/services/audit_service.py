import logging
from typing import List, Optional

from ...domain.models import AuditEntry
from ...domain.ports.persistence import AuditLogRepository
from ...domain.validation import validate_event

logger = logging.getLogger(__name__)


class AuditLogService:
    """Append-only access to the per-user event log."""

    def __init__(self, repository: AuditLogRepository) -> None:
        self._repository = repository

    def append(self, user_id: str, event: str) -> AuditEntry:
        validate_event(event)
        entry = self._repository.append_event(user_id, event)
        logger.debug("Recorded audit event %s for user %s", entry.id, user_id)
        return entry

    def list_events(self, user_id: str, limit: Optional[int] = None, offset: int = 0) -> List[AuditEntry]:
        if limit is not None and limit < 1:
            raise ValueError("limit must be positive")
        if offset < 0:
            raise ValueError("offset must not be negative")
        return self._repository.get_events(user_id, limit=limit, offset=offset)
