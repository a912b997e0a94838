"""Outbound notification webhook with exponential backoff, fire-and-forget"""

import asyncio
import logging
from typing import Any, Dict

import httpx

from casino_ledger.config import settings
from casino_ledger.infrastructure.observability.metrics import (
    notification_failure_counter,
    notification_latency_histogram,
)

logger = logging.getLogger(__name__)


class NotificationClient:
    """Client for sending account notifications (verification email etc.)"""

    def __init__(self, webhook_url: str | None = None):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.max_retries = settings.notification_max_retries
        self.backoff_base = settings.notification_backoff_base

    async def send(self, payload: Dict[str, Any]) -> bool:
        """
        Deliver a notification, retrying on 5xx and network errors.

        Runs after the ledger transaction has committed. Delivery failure is
        logged and counted but never raised: nothing downstream of a
        committed financial operation may depend on it.

        Returns:
            True if the webhook accepted the payload
        """
        attempt = 0
        async with httpx.AsyncClient() as client:
            while attempt < self.max_retries:
                try:
                    with notification_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=settings.http_timeout_seconds,
                        )
                        response.raise_for_status()
                        return True

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    notification_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logger.error(
                            f"Notification delivery failed after {attempt} attempts: {e}",
                            extra={"event": payload.get("event")},
                        )
                        return False

                    # Exponential backoff: 1s, 2s, 4s, ...
                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

        return False

    async def send_verification(self, user_id: str, email: str) -> bool:
        return await self.send(
            {
                "event": "ACCOUNT_VERIFICATION",
                "user_id": user_id,
                "email": email,
                "subject": "Verify Your Casino Platform Account",
            }
        )
