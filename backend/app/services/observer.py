from __future__ import annotations

import logging
from typing import Any

from app.core.errors import ContactAPIError

logger = logging.getLogger(__name__)


class IntakeObserver:
    """Receives intake pipeline events. The base class ignores them."""

    def rejected(self, stage: str, error: ContactAPIError) -> None:
        pass

    def persistence_failed(self, error: ContactAPIError) -> None:
        pass

    def created(self, record: Any) -> None:
        pass

    def notified(self, record: Any) -> None:
        pass

    def notify_failed(self, record: Any, exc: BaseException) -> None:
        pass


class LoggingIntakeObserver(IntakeObserver):
    def rejected(self, stage: str, error: ContactAPIError) -> None:
        logger.info("Submission rejected at %s: %s %s", stage, error.error, error.details or "")

    def persistence_failed(self, error: ContactAPIError) -> None:
        logger.error("Database error: %s", error.details)

    def created(self, record: Any) -> None:
        logger.info("Contact %s created", record.id)

    def notified(self, record: Any) -> None:
        logger.info("Webhook delivered for contact %s", record.id)

    def notify_failed(self, record: Any, exc: BaseException) -> None:
        logger.warning("Webhook delivery failed for contact %s: %s", record.id, exc)
