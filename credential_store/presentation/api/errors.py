from fastapi import HTTPException, status

from ...domain.errors import (
    AuthenticationError,
    ConflictError,
    CredentialStoreError,
    StorageUnavailable,
    UserNotFound,
    ValidationError,
)


def to_http_exception(exc: CredentialStoreError) -> HTTPException:
    """Map a store error onto the response a client is allowed to see."""
    if isinstance(exc, AuthenticationError):
        # Inactive accounts and bad secrets look the same from outside.
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, UserNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    if isinstance(exc, StorageUnavailable):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")
