from __future__ import annotations

import logging
from typing import Optional

from ...core.security import SecretHasher
from ...domain.errors import AccountInactive, InvalidCredentials, UserNotFound
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ...domain.validation import normalize_email, validate_handle, validate_language

logger = logging.getLogger(__name__)


class CredentialService:
    """Creates, updates and verifies user accounts."""

    def __init__(self, users: UserRepository, hasher: SecretHasher) -> None:
        self._users = users
        self._hasher = hasher

    # ------------------------------------------------------------------
    def create_user(
        self,
        email: str,
        secret: str,
        handle: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language: Optional[str] = None,
    ) -> str:
        email_clean = normalize_email(email)
        validate_handle(handle)
        language_code = validate_language(language)
        user = self._users.create_user(
            email=email_clean,
            secret=secret,
            handle=handle,
            first_name=first_name,
            last_name=last_name,
            language=language_code,
            audit_event="account created",
        )
        logger.info("Created user %s with handle %s", user.user_id, user.handle)
        return user.user_id

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
    ) -> User:
        changed = []
        if email is not None:
            email = normalize_email(email)
            changed.append("email")
        if secret is not None:
            changed.append("secret")
        if first_name is not None or last_name is not None:
            changed.append("name")
        if language is not None:
            validate_language(language)
            changed.append("language")
        user = self._users.update_user(
            user_id,
            email=email,
            secret=secret,
            first_name=first_name,
            last_name=last_name,
            language=language,
            active=active,
            audit_event=f"account updated: {', '.join(changed)}" if changed else None,
        )
        if changed:
            logger.info("Updated user %s (%s)", user_id, ", ".join(changed))
        if active is not None:
            logger.info("Set active=%s for user %s", active, user_id)
        return user

    def update_secret(self, user_id: str, new_secret: str) -> None:
        self._users.update_user(user_id, secret=new_secret, audit_event="secret changed")
        logger.info("Secret changed for user %s", user_id)

    def deactivate(self, user_id: str) -> None:
        # The repository records "account deactivated" only on a real transition.
        self._users.update_user(user_id, active=False)
        logger.info("Deactivated user %s", user_id)

    def verify_credentials(self, handle: str, candidate_secret: str) -> str:
        credentials = self._users.get_credentials(handle) if handle else None
        if credentials is None:
            self._hasher.burn(candidate_secret)
            logger.info("Verification failed: unknown handle")
            raise InvalidCredentials("Invalid credentials.")
        user, secret_hash = credentials
        if not self._hasher.verify(candidate_secret, secret_hash):
            logger.info("Verification failed for user %s: wrong secret", user.user_id)
            raise InvalidCredentials("Invalid credentials.")
        if not user.active:
            logger.warning("Verification refused for user %s: account inactive", user.user_id)
            raise AccountInactive("Account is inactive.")
        return user.user_id

    # Read-only lookups ------------------------------------------------
    def get_user(self, user_id: str) -> User:
        user = self._users.get_user_by_id(user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found.")
        return user

    def find_by_handle(self, handle: str) -> User:
        user = self._users.get_user_by_handle(handle)
        if not user:
            raise UserNotFound(f"No user with handle {handle}.")
        return user

    def find_by_email(self, email: str) -> User:
        user = self._users.get_user_by_email(email)
        if not user:
            raise UserNotFound("No user with that email.")
        return user
