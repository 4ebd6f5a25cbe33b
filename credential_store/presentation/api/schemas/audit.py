"""Pydantic schemas for audit log endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class AuditEventRequest(BaseModel):
    event: str


class AuditEntryResponse(BaseModel):
    id: int
    user_id: str
    event_time: datetime
    event: str


class AuditEntryListResponse(BaseModel):
    items: List[AuditEntryResponse]
    limit: Optional[int] = None
    offset: int = 0
