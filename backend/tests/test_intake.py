from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.core.errors import PersistenceError, PolicyError, ValidationError
from app.schemas.contact import ContactSubmission
from app.services.intake import CAPTCHA_INVALID, CAPTCHA_REQUIRED, TERMS_REQUIRED, ContactIntake
from app.services.validation import MESSAGE_ERROR

from conftest import RecordingObserver


class FakeStore:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.inserted: list[dict] = []

    def insert(self, **fields):
        if self.fail:
            raise PersistenceError(details="connection refused")
        self.inserted.append(fields)
        return SimpleNamespace(id=len(self.inserted), created_at=datetime.now(timezone.utc), **fields)


class FakeVerifier:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.tokens: list[str] = []

    def verify(self, token, remote_ip=None) -> bool:
        self.tokens.append(token)
        return self.result


class FakeNotifier:
    def __init__(self) -> None:
        self.notified: list = []

    def notify(self, record) -> None:
        self.notified.append(record)


def submission(**overrides) -> ContactSubmission:
    fields = {
        "name": " Ana ",
        "email": "ANA@Example.com",
        "phone": " 600 123 4567 ",
        "message": "  Hello there, world  ",
        "captcha_token": "tok",
        "terms_accepted": True,
    }
    fields.update(overrides)
    return ContactSubmission(**fields)


def build(store=None, verifier=None, notifier=None, captcha_enabled=True):
    observer = RecordingObserver()
    intake = ContactIntake(
        store or FakeStore(),
        verifier if verifier is not None else FakeVerifier(),
        notifier=notifier,
        observer=observer,
        captcha_enabled=captcha_enabled,
    )
    return intake, observer


@pytest.mark.parametrize("terms", [False, None])
def test_terms_not_accepted_stops_before_anything_else(terms):
    store, verifier = FakeStore(), FakeVerifier()
    intake, observer = build(store, verifier)

    with pytest.raises(PolicyError) as excinfo:
        intake.submit(submission(terms_accepted=terms, name=""))

    assert excinfo.value.error == TERMS_REQUIRED
    assert verifier.tokens == []
    assert store.inserted == []
    assert observer.events == [("rejected", "terms")]


@pytest.mark.parametrize("token", [None, "", "   "])
def test_missing_captcha_token(token):
    verifier = FakeVerifier()
    intake, _ = build(verifier=verifier)

    with pytest.raises(PolicyError) as excinfo:
        intake.submit(submission(captcha_token=token))

    assert excinfo.value.error == CAPTCHA_REQUIRED
    assert verifier.tokens == []


def test_failed_verification_is_a_generic_policy_error():
    store = FakeStore()
    intake, observer = build(store, FakeVerifier(result=False))

    with pytest.raises(PolicyError) as excinfo:
        intake.submit(submission())

    assert excinfo.value.error == CAPTCHA_INVALID
    assert excinfo.value.status_code == 400
    assert store.inserted == []
    assert observer.events == [("rejected", "captcha")]


def test_captcha_is_checked_before_field_validation():
    intake, _ = build(verifier=FakeVerifier(result=False))

    with pytest.raises(PolicyError):
        intake.submit(submission(message="short"))


def test_validation_errors_carry_full_list():
    store = FakeStore()
    intake, observer = build(store)

    with pytest.raises(ValidationError) as excinfo:
        intake.submit(submission(message="123456789"))

    assert excinfo.value.errors == [MESSAGE_ERROR]
    assert store.inserted == []
    assert observer.events == [("rejected", "validation")]


def test_success_normalizes_fields_and_defers_notification():
    store, notifier = FakeStore(), FakeNotifier()
    intake, observer = build(store, notifier=notifier)
    deferred = []

    record = intake.submit(submission(), defer=lambda func, *args: deferred.append((func, args)))

    assert store.inserted == [
        {
            "name": "Ana",
            "email": "ana@example.com",
            "phone": "600 123 4567",
            "message": "Hello there, world",
            "terms_accepted": True,
        }
    ]
    assert notifier.notified == []
    func, args = deferred[0]
    func(*args)
    assert notifier.notified == [record]
    assert observer.events == [("created", 1)]


def test_without_defer_notification_runs_inline():
    notifier = FakeNotifier()
    intake, _ = build(notifier=notifier)

    record = intake.submit(submission())

    assert notifier.notified == [record]


def test_persistence_failure_propagates_without_notifying():
    notifier = FakeNotifier()
    intake, observer = build(FakeStore(fail=True), notifier=notifier)

    with pytest.raises(PersistenceError):
        intake.submit(submission())

    assert notifier.notified == []
    assert observer.events == [("persistence_failed", "connection refused")]


def test_captcha_disabled_skips_token_and_verifier():
    verifier = FakeVerifier(result=False)
    intake, _ = build(verifier=verifier, captcha_enabled=False)

    record = intake.submit(submission(captcha_token=None))

    assert record.id == 1
    assert verifier.tokens == []
