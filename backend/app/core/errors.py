from __future__ import annotations

from typing import Any, Optional


class ContactAPIError(Exception):
    """Base error for the intake pipeline, mapped to an HTTP response at the API boundary."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, error: Optional[str] = None, details: Any = None) -> None:
        self.error = error or self.error
        self.details = details
        super().__init__(self.error)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ContactAPIError):
    status_code = 400
    error = "Invalid data"

    def __init__(self, errors: list[str]) -> None:
        super().__init__(details=list(errors))

    @property
    def errors(self) -> list[str]:
        return self.details


class PolicyError(ContactAPIError):
    """Terms not accepted, or the CAPTCHA token is missing or did not verify."""

    status_code = 400


class NotFoundError(ContactAPIError):
    status_code = 404
    error = "Contact not found"


class PersistenceError(ContactAPIError):
    status_code = 500
    error = "Error saving to the database"
