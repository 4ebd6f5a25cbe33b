from fastapi import Depends, Request

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_settings(container: ApplicationContainer = Depends(get_container)):
    return container.settings


def get_authorizer(container: ApplicationContainer = Depends(get_container)):
    return container.authorizer


def get_credential_service(container: ApplicationContainer = Depends(get_container)):
    return container.credential_service


def get_audit_service(container: ApplicationContainer = Depends(get_container)):
    return container.audit_service
