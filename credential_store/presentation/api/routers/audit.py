from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ....application.services.audit_service import AuditLogService
from ....core.config import Settings
from ....core.dependencies import get_audit_service, get_settings
from ....domain.errors import CredentialStoreError
from ....domain.models import AuditEntry
from ...api.dependencies import require_full_access, require_read_access
from ...api.errors import to_http_exception
from ...api.schemas.audit import AuditEntryListResponse, AuditEntryResponse, AuditEventRequest

router = APIRouter(prefix="/api/users", tags=["Audit Log"], dependencies=[Depends(require_read_access)])


@router.post(
    "/{user_id}/events",
    response_model=AuditEntryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_full_access)],
)
def append_event(
    user_id: str,
    payload: AuditEventRequest,
    audit: AuditLogService = Depends(get_audit_service),
) -> AuditEntryResponse:
    try:
        entry = audit.append(user_id, payload.event)
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return _serialize_entry(entry)


@router.get("/{user_id}/events", response_model=AuditEntryListResponse)
def list_events(
    user_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    audit: AuditLogService = Depends(get_audit_service),
    settings: Settings = Depends(get_settings),
) -> AuditEntryListResponse:
    page_size = limit or settings.audit_page_size
    try:
        entries = audit.list_events(user_id, limit=page_size, offset=offset)
    except CredentialStoreError as exc:
        raise to_http_exception(exc) from exc
    return AuditEntryListResponse(
        items=[_serialize_entry(entry) for entry in entries],
        limit=page_size,
        offset=offset,
    )


def _serialize_entry(entry: AuditEntry) -> AuditEntryResponse:
    return AuditEntryResponse(
        id=entry.id,
        user_id=entry.user_id,
        event_time=entry.event_time,
        event=entry.event,
    )
