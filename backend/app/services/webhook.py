from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from app.schemas.contact import ContactOut
from app.services.observer import IntakeObserver, LoggingIntakeObserver

logger = logging.getLogger(__name__)


class WebhookNotifier:
    """Forwards a stored contact to an automation webhook (n8n, Make, Zapier...).

    One POST per record, no retry. Whatever goes wrong is handed to the
    observer and swallowed: by the time this runs the submission has already
    been answered.
    """

    def __init__(
        self,
        url: str,
        client: httpx.Client,
        *,
        timeout: float = 5.0,
        observer: Optional[IntakeObserver] = None,
    ) -> None:
        self.url = url
        self.client = client
        self.timeout = timeout
        self.observer = observer or LoggingIntakeObserver()

    def notify(self, record: Any) -> None:
        if not self.url:
            logger.debug("No webhook URL configured; skipping contact %s", record.id)
            return

        try:
            payload = ContactOut.model_validate(record).model_dump(mode="json")
            res = self.client.post(self.url, json=payload, timeout=self.timeout)
            res.raise_for_status()
        except Exception as e:
            self.observer.notify_failed(record, e)
            return

        self.observer.notified(record)
