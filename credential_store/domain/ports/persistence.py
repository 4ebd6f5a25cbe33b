from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

from ..models import AuditEntry, User


class UserRepository(Protocol):
    """Persistence functions related to user accounts.

    Writers take the plaintext secret and hash it themselves; there is no
    method that stores a caller-supplied hash.
    """

    def create_user(
        self,
        email: str,
        secret: str,
        handle: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language: str = "en",
        audit_event: Optional[str] = None,
    ) -> User:
        ...

    def update_user(
        self,
        user_id: str,
        *,
        email: Optional[str] = None,
        secret: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language: Optional[str] = None,
        active: Optional[bool] = None,
        audit_event: Optional[str] = None,
    ) -> User:
        ...

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_user_by_handle(self, handle: str) -> Optional[User]:
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_credentials(self, handle: str) -> Optional[Tuple[User, str]]:
        ...


class AuditLogRepository(Protocol):
    """Append-only storage for account events."""

    def append_event(self, user_id: str, event: str) -> AuditEntry:
        ...

    def get_events(self, user_id: str, limit: Optional[int] = None, offset: int = 0) -> List[AuditEntry]:
        ...


class PersistenceGateway(
    UserRepository,
    AuditLogRepository,
    Protocol,
):
    """Composite gateway combining every persistence concern used by the app."""

    pass
