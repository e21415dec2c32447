"""Notification webhook client with exponential backoff retry logic"""

import asyncio
import logging
from typing import Any, Dict

import httpx

from parish_hub.config import settings
from parish_hub.domain.exceptions import NotificationError
from parish_hub.infrastructure.observability.metrics import (
    notification_failure_counter,
    notification_latency_histogram,
)

logger = logging.getLogger(__name__)


class NotificationClient:
    """Client for posting transfer lifecycle events to the notification webhook"""

    def __init__(self, webhook_url: str | None = None, timeout: float | None = None):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_event(self, payload: Dict[str, Any]) -> None:
        """
        Deliver an event with retry logic.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1) seconds
        - Retries on HTTP errors and network failures
        - Tracks latency histogram and failure counter

        Raises:
            NotificationError: After the final failed attempt
        """
        if not self.enabled:
            logger.debug("Notification webhook not configured, dropping event", extra={"event": payload.get("event")})
            return

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with notification_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    notification_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logger.error(
                            f"Notification delivery failed: {e}",
                            extra={"event": payload.get("event"), "attempts": attempt},
                        )
                        raise NotificationError(f"Notification delivery failed after {attempt} attempts") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
