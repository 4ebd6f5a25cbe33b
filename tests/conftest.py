import pytest
from fastapi.testclient import TestClient

from credential_store.application.services.audit_service import AuditLogService
from credential_store.application.services.credential_service import CredentialService
from credential_store.core.app_factory import create_application
from credential_store.core.config import Settings
from credential_store.core.security import SecretHasher
from credential_store.infrastructure.persistence.sqlite import SQLitePersistence

FULL_KEY = "full-access-test-key"
READ_KEY = "read-only-test-key"


@pytest.fixture
def hasher():
    # Minimum bcrypt cost keeps the suite fast.
    return SecretHasher(rounds=4)


@pytest.fixture
def persistence(tmp_path, hasher):
    store = SQLitePersistence(tmp_path / "credentials.db", hasher)
    yield store
    store.close()


@pytest.fixture
def credential_service(persistence, hasher):
    return CredentialService(persistence, hasher)


@pytest.fixture
def audit_service(persistence):
    return AuditLogService(persistence)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("FULL_ACCESS_API_KEY", FULL_KEY)
    monkeypatch.setenv("READ_ONLY_API_KEY", READ_KEY)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("AUDIT_PAGE_SIZE", "50")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    return Settings()


@pytest.fixture
def client(settings):
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def full_headers():
    return {"Authorization": f"Bearer {FULL_KEY}"}


@pytest.fixture
def read_headers():
    return {"Authorization": f"Bearer {READ_KEY}"}
