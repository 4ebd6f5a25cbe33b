from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from .security import ApiKeyAuthorizer, SecretHasher
from ..application.services.audit_service import AuditLogService
from ..application.services.credential_service import CredentialService
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import audit as audit_router
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import users as users_router

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Credential Store", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(users_router.router)
    app.include_router(auth_router.router)
    app.include_router(audit_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        hasher = SecretHasher(rounds=settings.bcrypt_rounds)
        persistence = SQLitePersistence(settings.database_path, hasher)
        authorizer = ApiKeyAuthorizer(settings.full_access_api_key, settings.read_only_api_key)

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            authorizer=authorizer,
            credential_service=CredentialService(persistence, hasher),
            audit_service=AuditLogService(persistence),
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Credential store ready at %s", settings.database_path)

        try:
            yield
        finally:
            persistence.close()

    return lifespan
