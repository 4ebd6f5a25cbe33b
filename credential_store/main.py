"""ASGI entrypoint for the credential store.

Serve with ``uvicorn credential_store.main:app``; configuration comes from the
environment (see ``core.config.Settings``).
"""

from .core.app_factory import create_application

app = create_application()

__all__ = ("app",)
