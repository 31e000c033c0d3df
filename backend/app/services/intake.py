from __future__ import annotations

from typing import Any, Callable, Optional

from app.core.errors import PersistenceError, PolicyError, ValidationError
from app.crud.contact import ContactStore
from app.models.contact import Contact
from app.services.captcha import CaptchaVerifier
from app.services.observer import IntakeObserver, LoggingIntakeObserver
from app.services.validation import validate_contact
from app.services.webhook import WebhookNotifier

TERMS_REQUIRED = "You must accept the terms and conditions"
CAPTCHA_REQUIRED = "CAPTCHA verification is required"
CAPTCHA_INVALID = "Invalid CAPTCHA"

Defer = Callable[..., Any]


def _run_now(func: Callable[..., Any], *args: Any) -> None:
    func(*args)


class ContactIntake:
    """Turns a submission into a stored contact.

    Steps run in a fixed order and the first failing guard ends the request:
    terms flag, CAPTCHA token presence, CAPTCHA verification, field
    validation, insert. The webhook is handed to ``defer`` only after the
    insert succeeded, and its outcome never reaches the caller.
    """

    def __init__(
        self,
        store: ContactStore,
        verifier: Optional[CaptchaVerifier],
        *,
        notifier: Optional[WebhookNotifier] = None,
        observer: Optional[IntakeObserver] = None,
        captcha_enabled: bool = True,
    ) -> None:
        self.store = store
        self.verifier = verifier
        self.notifier = notifier
        self.observer = observer or LoggingIntakeObserver()
        self.captcha_enabled = captcha_enabled

    def _reject(self, stage: str, error: Exception) -> Exception:
        self.observer.rejected(stage, error)
        return error

    def submit(
        self,
        submission: Any,
        *,
        defer: Optional[Defer] = None,
        remote_ip: Optional[str] = None,
    ) -> Contact:
        if submission.terms_accepted is not True:
            raise self._reject("terms", PolicyError(TERMS_REQUIRED))

        if self.captcha_enabled:
            token = (submission.captcha_token or "").strip()
            if not token:
                raise self._reject("captcha", PolicyError(CAPTCHA_REQUIRED))
            if self.verifier is None or not self.verifier.verify(token, remote_ip):
                raise self._reject("captcha", PolicyError(CAPTCHA_INVALID))

        errors = validate_contact(submission)
        if errors:
            raise self._reject("validation", ValidationError(errors))

        try:
            record = self.store.insert(
                name=submission.name.strip(),
                email=submission.email.strip().lower(),
                phone=submission.phone.strip(),
                message=submission.message.strip(),
                terms_accepted=True,
            )
        except PersistenceError as e:
            self.observer.persistence_failed(e)
            raise

        self.observer.created(record)

        if self.notifier is not None:
            (defer or _run_now)(self.notifier.notify, record)

        return record
