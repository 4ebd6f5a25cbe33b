import logging
import os
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging for the credential service and its scripts.

    ``level`` wins over ``LOG_LEVEL``. Account events are logged by user id and
    handle; secrets and hashes never reach a record.
    """
    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
