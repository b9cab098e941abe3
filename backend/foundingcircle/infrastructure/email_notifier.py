"""Email Notifiers — EmailNotifier implementations for access-code delivery.

Invariants:
    - notify_welcome_with_code may raise; isolation from callers is the
      NotificationDispatcher's job, not the notifier's
    - Webhook payload is plain text only (templating lives with the email provider)
    - Non-2xx webhook responses raise httpx.HTTPStatusError

Design Decisions:
    - LoggingEmailNotifier as default: local runs and CI need no mail provider
    - httpx.AsyncClient per call with an explicit timeout: a slow provider can only
      ever delay the background task, never a request
"""

import logging

import httpx

from foundingcircle.infrastructure.observability import mask_email

logger = logging.getLogger(__name__)

ACCESS_CODE_SUBJECT = "Your Founding Circle Access Code"


def compose_access_code_text(access_code: str, queue_number: int) -> str:
    return (
        f"Congratulations, Founding Member #{queue_number}! "
        f"Your exclusive access code is:\n\n    {access_code}\n\n"
        "Use this code when signing up to unlock your founding member privileges."
    )


class LoggingEmailNotifier:
    """Records deliveries in the log instead of sending mail."""

    async def notify_welcome_with_code(
        self, email: str, access_code: str, queue_number: int,
    ) -> None:
        logger.info(
            f"Access code email for {mask_email(email)} (#{queue_number}) not sent: "
            "no email webhook configured",
            extra={"queue_number": queue_number},
        )


class WebhookEmailNotifier:
    """POSTs access-code emails to a transactional-mail webhook."""

    def __init__(
        self,
        webhook_url: str,
        sender: str,
        timeout_seconds: float = 3.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._webhook_url = webhook_url
        self._sender = sender
        self._timeout = timeout_seconds
        self._transport = transport

    async def notify_welcome_with_code(
        self, email: str, access_code: str, queue_number: int,
    ) -> None:
        payload = {
            "to": email,
            "from": self._sender,
            "subject": ACCESS_CODE_SUBJECT,
            "text": compose_access_code_text(access_code, queue_number),
        }
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport,
        ) as client:
            response = await client.post(self._webhook_url, json=payload)
            response.raise_for_status()
        logger.info(
            f"Access code email sent to {mask_email(email)}",
            extra={"queue_number": queue_number},
        )
