from __future__ import annotations

from app.schemas.contact import ContactCreated, ContactList, ContactOut, ContactSubmission

__all__ = [
    "ContactSubmission",
    "ContactOut",
    "ContactCreated",
    "ContactList",
]
