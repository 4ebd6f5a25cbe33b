from dataclasses import dataclass

from ..application.services.audit_service import AuditLogService
from ..application.services.credential_service import CredentialService
from ..domain.ports.persistence import PersistenceGateway
from .config import Settings
from .security import ApiKeyAuthorizer


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    authorizer: ApiKeyAuthorizer
    credential_service: CredentialService
    audit_service: AuditLogService
