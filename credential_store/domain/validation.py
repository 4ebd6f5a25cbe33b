"""Shape checks shared by the account and audit services."""

import re
from typing import Optional

from .errors import EventTooLong, InvalidEmail, InvalidEvent, InvalidHandle, InvalidLanguage

EMAIL_PATTERN = re.compile(r"^.+@.+\..+$", re.IGNORECASE)
MAX_HANDLE_LENGTH = 32
MAX_EVENT_LENGTH = 1024
DEFAULT_LANGUAGE = "en"


def normalize_email(email: str) -> str:
    email_clean = (email or "").strip().lower()
    if not EMAIL_PATTERN.match(email_clean):
        raise InvalidEmail("Email must look like local@domain.tld.")
    return email_clean


def validate_handle(handle: str) -> str:
    if not handle or not handle.strip():
        raise InvalidHandle("Handle is required.")
    if len(handle) > MAX_HANDLE_LENGTH:
        raise InvalidHandle(f"Handle must be at most {MAX_HANDLE_LENGTH} characters.")
    return handle


def validate_language(language: Optional[str]) -> str:
    if language is None:
        return DEFAULT_LANGUAGE
    if len(language) != 2:
        raise InvalidLanguage("Language must be exactly 2 characters.")
    return language


def validate_event(event: str) -> str:
    """Reject over-long events rather than truncating them."""
    if not event or not event.strip():
        raise InvalidEvent("Event description is required.")
    if len(event) > MAX_EVENT_LENGTH:
        raise EventTooLong(f"Event description must be at most {MAX_EVENT_LENGTH} characters.")
    return event
