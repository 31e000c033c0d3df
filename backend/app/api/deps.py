from __future__ import annotations

from typing import Optional

import httpx
from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.crud.contact import ContactStore
from app.db.session import get_db
from app.schemas.contact import ContactSubmission
from app.services.captcha import CaptchaVerifier
from app.services.intake import ContactIntake
from app.services.observer import IntakeObserver, LoggingIntakeObserver
from app.services.webhook import WebhookNotifier


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.Client:
    return request.app.state.http_client


def get_client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def get_submission(request: Request) -> ContactSubmission:
    """Parse the contact form from a JSON body or a classic form post."""
    content_type = request.headers.get("content-type", "").lower()
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            data = dict(await request.form())
        else:
            data = await request.json()
    except ValueError as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": None}]
        ) from e

    try:
        return ContactSubmission.model_validate(data)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors()) from e


def get_observer() -> IntakeObserver:
    return LoggingIntakeObserver()


def get_store(db: Session = Depends(get_db)) -> ContactStore:
    return ContactStore(db)


def get_verifier(
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
) -> Optional[CaptchaVerifier]:
    if not settings.CAPTCHA_ENABLED:
        return None
    return CaptchaVerifier(
        settings.CAPTCHA_SECRET_KEY,
        client,
        verify_url=settings.CAPTCHA_VERIFY_URL,
        timeout=settings.CAPTCHA_TIMEOUT_SECONDS,
    )


def get_notifier(
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
    observer: IntakeObserver = Depends(get_observer),
) -> Optional[WebhookNotifier]:
    if not settings.WEBHOOK_URL:
        return None
    return WebhookNotifier(
        settings.WEBHOOK_URL,
        client,
        timeout=settings.WEBHOOK_TIMEOUT_SECONDS,
        observer=observer,
    )


def get_intake(
    settings: Settings = Depends(get_settings),
    store: ContactStore = Depends(get_store),
    verifier: Optional[CaptchaVerifier] = Depends(get_verifier),
    notifier: Optional[WebhookNotifier] = Depends(get_notifier),
    observer: IntakeObserver = Depends(get_observer),
) -> ContactIntake:
    return ContactIntake(
        store,
        verifier,
        notifier=notifier,
        observer=observer,
        captcha_enabled=settings.CAPTCHA_ENABLED,
    )
