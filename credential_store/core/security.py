"""Secret hashing and API-key scope resolution."""

from __future__ import annotations

import secrets
from enum import Enum
from typing import Optional

import bcrypt

from ..domain.errors import InvalidSecret

# bcrypt only consumes the first 72 bytes of its input.
MAX_SECRET_BYTES = 72


class SecretHasher:
    """Salted one-way hashing of user secrets with bcrypt.

    The salt and cost factor are embedded in every hash produced, so
    verification needs nothing but the stored value.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds
        # Compared against when a handle does not exist so that the failure
        # costs the same as a wrong secret.
        self._dummy_hash = self.hash(secrets.token_urlsafe(16))

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, secret: str) -> str:
        encoded = self._encode(secret)
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, secret: str, secret_hash: str) -> bool:
        try:
            encoded = self._encode(secret)
        except InvalidSecret:
            # No valid secret can match; still pay for one comparison.
            bcrypt.checkpw(b"-", self._dummy_hash.encode("ascii"))
            return False
        try:
            return bcrypt.checkpw(encoded, secret_hash.encode("ascii"))
        except ValueError:
            # Malformed stored hash.
            return False

    def burn(self, secret: str) -> None:
        """Spend one verification's worth of time without a real hash."""
        self.verify(secret, self._dummy_hash)

    @staticmethod
    def _encode(secret: str) -> bytes:
        if not secret:
            raise InvalidSecret("Secret must not be empty.")
        encoded = secret.encode("utf-8")
        if len(encoded) > MAX_SECRET_BYTES:
            raise InvalidSecret(f"Secret must be at most {MAX_SECRET_BYTES} bytes.")
        return encoded


class AccessScope(str, Enum):
    READ_ONLY = "read_only"
    FULL = "full"

    def allows(self, required: "AccessScope") -> bool:
        return self is AccessScope.FULL or required is AccessScope.READ_ONLY


class ApiKeyAuthorizer:
    """Maps bearer API keys to the scope they grant."""

    def __init__(self, full_access_key: str, read_only_key: str) -> None:
        if not full_access_key or not read_only_key:
            raise RuntimeError("Both API keys must be configured.")
        if full_access_key == read_only_key:
            raise RuntimeError("Full-access and read-only API keys must differ.")
        self._keys = (
            (full_access_key.encode("utf-8"), AccessScope.FULL),
            (read_only_key.encode("utf-8"), AccessScope.READ_ONLY),
        )

    def resolve(self, token: Optional[str]) -> Optional[AccessScope]:
        if not token:
            return None
        candidate = token.encode("utf-8")
        granted = None
        for key, scope in self._keys:
            if secrets.compare_digest(candidate, key) and granted is None:
                granted = scope
        return granted
