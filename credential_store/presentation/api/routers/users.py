"""API router for account management."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ....application.services.credential_service import CredentialService
from ....core.dependencies import get_credential_service
from ....domain.errors import CredentialStoreError
from ....domain.models import User
from ...api.dependencies import require_full_access, require_read_access
from ...api.errors import to_http_exception
from ...api.schemas.user_schemas import (
    SecretUpdateRequest,
    UserCreateRequest,
    UserCreateResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(require_read_access)])


@router.post(
    "",
    response_model=UserCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_full_access)],
)
def create_user(
    payload: UserCreateRequest,
    credentials: CredentialService = Depends(get_credential_service),
) -> UserCreateResponse:
    try:
        user_id = credentials.create_user(
            email=payload.email,
            secret=payload.secret,
            handle=payload.handle,
            first_name=payload.first_name,
            last_name=payload.last_name,
            language=payload.language,
        )
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return UserCreateResponse(user_id=user_id)


@router.get("/lookup", response_model=UserResponse)
def lookup_user(
    handle: Optional[str] = None,
    email: Optional[str] = None,
    credentials: CredentialService = Depends(get_credential_service),
) -> UserResponse:
    if bool(handle) == bool(email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide exactly one of handle or email.",
        )
    try:
        user = credentials.find_by_handle(handle) if handle else credentials.find_by_email(email)
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return _serialize_user(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    credentials: CredentialService = Depends(get_credential_service),
) -> UserResponse:
    try:
        user = credentials.get_user(user_id)
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return _serialize_user(user)


@router.patch("/{user_id}", response_model=UserResponse, dependencies=[Depends(require_full_access)])
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    credentials: CredentialService = Depends(get_credential_service),
) -> UserResponse:
    # An explicit null clears a name; an omitted field is left alone.
    first_name = payload.first_name
    if first_name is None and "first_name" in payload.model_fields_set:
        first_name = ""
    last_name = payload.last_name
    if last_name is None and "last_name" in payload.model_fields_set:
        last_name = ""
    try:
        user = credentials.update_user(
            user_id,
            email=payload.email,
            secret=payload.secret,
            first_name=first_name,
            last_name=last_name,
            language=payload.language,
            active=payload.active,
        )
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return _serialize_user(user)


@router.put(
    "/{user_id}/secret",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_full_access)],
)
def update_secret(
    user_id: str,
    payload: SecretUpdateRequest,
    credentials: CredentialService = Depends(get_credential_service),
) -> Response:
    try:
        credentials.update_secret(user_id, payload.secret)
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/deactivate",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_full_access)],
)
def deactivate_user(
    user_id: str,
    credentials: CredentialService = Depends(get_credential_service),
) -> Response:
    try:
        credentials.deactivate(user_id)
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _serialize_user(user: User) -> UserResponse:
    return UserResponse(
        user_id=user.user_id,
        email=user.email,
        handle=user.handle,
        first_name=user.first_name,
        last_name=user.last_name,
        language=user.language,
        active=user.active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
