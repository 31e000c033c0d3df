"""
Pytest configuration and fixtures
"""
from __future__ import annotations

from typing import Any, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.api import deps
from app.core.config import Settings
from app.db.base import Base
from app.db.session import build_session_factory
from app.main import create_app
from app.services.observer import IntakeObserver

CAPTCHA_URL = "https://captcha.example.com/siteverify"
WEBHOOK_URL = "https://hooks.example.com/contact"


class RecordingObserver(IntakeObserver):
    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def rejected(self, stage, error) -> None:
        self.events.append(("rejected", stage))

    def persistence_failed(self, error) -> None:
        self.events.append(("persistence_failed", error.details))

    def created(self, record) -> None:
        self.events.append(("created", record.id))

    def notified(self, record) -> None:
        self.events.append(("notified", record.id))

    def notify_failed(self, record, exc) -> None:
        self.events.append(("notify_failed", record.id))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class RemoteServices:
    """Stands in for the CAPTCHA provider and the webhook receiver."""

    def __init__(self) -> None:
        self.captcha_success = True
        self.captcha_requests: list[httpx.Request] = []
        self.webhook_requests: list[httpx.Request] = []
        self.webhook_error: Optional[Exception] = None
        self.webhook_status = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == CAPTCHA_URL:
            self.captcha_requests.append(request)
            return httpx.Response(200, json={"success": self.captcha_success})
        if url == WEBHOOK_URL:
            self.webhook_requests.append(request)
            if self.webhook_error is not None:
                raise self.webhook_error
            return httpx.Response(self.webhook_status, json={"ok": True})
        return httpx.Response(404)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings() -> Settings:
    s = Settings()
    s.CAPTCHA_ENABLED = True
    s.CAPTCHA_SECRET_KEY = "test-secret"
    s.CAPTCHA_VERIFY_URL = CAPTCHA_URL
    s.WEBHOOK_URL = WEBHOOK_URL
    s.CORS_ORIGINS = ["*"]
    return s


@pytest.fixture
def remote() -> RemoteServices:
    return RemoteServices()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def client(settings, engine, remote, observer):
    http_client = httpx.Client(transport=httpx.MockTransport(remote.handler))
    app = create_app(settings, engine=engine, http_client=http_client)
    app.dependency_overrides[deps.get_observer] = lambda: observer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def valid_payload() -> dict[str, Any]:
    return {
        "name": "  Ana Pérez ",
        "email": "Ana.Perez@Example.COM",
        "phone": " +34 (600) 123-456 ",
        "message": "  Me interesa el curso de Python avanzado.  ",
        "captcha_token": "tok-123",
        "terms_accepted": True,
    }
