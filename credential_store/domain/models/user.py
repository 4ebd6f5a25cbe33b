"""User domain model for credential store accounts."""

from datetime import datetime, timezone
from typing import Optional


class User:
    """
    User account as exposed to callers.

    The secret hash is deliberately absent: it never leaves the persistence
    layer except for verification.

    Attributes:
        user_id: Immutable UUID string, referenced by content collaborators
        email: Lower-cased email address (unique)
        handle: Login name (unique, at most 32 characters)
        first_name: Optional display name
        last_name: Optional display name
        language: Two-letter language code
        active: False once the account has been deactivated
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        user_id: str,
        email: str,
        handle: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language: str = "en",
        active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.user_id = user_id
        self.email = email
        self.handle = handle
        self.first_name = first_name
        self.last_name = last_name
        self.language = language
        self.active = active
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def __repr__(self) -> str:
        return f"<User user_id={self.user_id} handle={self.handle} active={self.active}>"
