"""Error hierarchy raised by the credential store and the audit log."""


class CredentialStoreError(Exception):
    """Base class for every error raised by the credential store."""


class ValidationError(CredentialStoreError, ValueError):
    """A supplied field does not have the required shape."""


class InvalidEmail(ValidationError):
    pass


class InvalidHandle(ValidationError):
    pass


class InvalidSecret(ValidationError):
    pass


class InvalidLanguage(ValidationError):
    pass


class InvalidEvent(ValidationError):
    pass


class EventTooLong(InvalidEvent):
    pass


class ConflictError(CredentialStoreError):
    """A uniqueness constraint would be violated."""


class DuplicateEmail(ConflictError):
    pass


class DuplicateHandle(ConflictError):
    pass


class UserNotFound(CredentialStoreError):
    pass


class AuthenticationError(CredentialStoreError):
    """Verification failed.

    Subclasses exist for internal callers and logs only; the service boundary
    reports every subclass identically so clients cannot enumerate accounts.
    """


class InvalidCredentials(AuthenticationError):
    pass


class AccountInactive(AuthenticationError):
    pass


class StorageUnavailable(CredentialStoreError):
    """The underlying database could not complete the operation."""
