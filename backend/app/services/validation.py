from __future__ import annotations

import re
from typing import Any

NAME_ERROR = "Name must be at least 2 characters long"
EMAIL_ERROR = "Email address is not valid"
PHONE_ERROR = "Phone number must have at least 10 digits"
MESSAGE_ERROR = "Message must be at least 10 characters long"

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"[\d\s\-\+\(\)]{10,}", re.ASCII)
WHITESPACE_RE = re.compile(r"\s")

MIN_NAME_LENGTH = 2
MIN_MESSAGE_LENGTH = 10


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def validate_contact(submission: Any) -> list[str]:
    """Return every field rule the submission breaks, in name/email/phone/message order.

    ``submission`` is anything exposing ``name``, ``email``, ``phone`` and
    ``message`` attributes. An empty list means the submission may be stored.
    """
    errors: list[str] = []

    name = _text(getattr(submission, "name", None))
    if name is None or len(name.strip()) < MIN_NAME_LENGTH:
        errors.append(NAME_ERROR)

    email = _text(getattr(submission, "email", None))
    if email is None or not EMAIL_RE.fullmatch(email):
        errors.append(EMAIL_ERROR)

    phone = _text(getattr(submission, "phone", None))
    if phone is None or not PHONE_RE.fullmatch(WHITESPACE_RE.sub("", phone)):
        errors.append(PHONE_ERROR)

    message = _text(getattr(submission, "message", None))
    if message is None or len(message.strip()) < MIN_MESSAGE_LENGTH:
        errors.append(MESSAGE_ERROR)

    return errors
