"""Email Notifiers — tests for webhook payloads and failure signalling.

Tests cover:
    - webhook receives to/from/subject/text with the code and position
    - non-2xx responses raise httpx.HTTPStatusError
    - LoggingEmailNotifier never raises
"""

import json

import httpx
import pytest

from foundingcircle.infrastructure.email_notifier import (
    ACCESS_CODE_SUBJECT,
    LoggingEmailNotifier,
    WebhookEmailNotifier,
    compose_access_code_text,
)

WEBHOOK_URL = "https://mail.test/send"


async def test_webhook_payload():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(202)

    notifier = WebhookEmailNotifier(
        WEBHOOK_URL, "hello@foundingcircle.test",
        transport=httpx.MockTransport(handler),
    )
    await notifier.notify_welcome_with_code("ada@example.com", "OSIA-AAAA-BBBB-CCCC", 7)

    [request] = captured
    assert str(request.url) == WEBHOOK_URL
    body = json.loads(request.content)
    assert body["to"] == "ada@example.com"
    assert body["from"] == "hello@foundingcircle.test"
    assert body["subject"] == ACCESS_CODE_SUBJECT
    assert "OSIA-AAAA-BBBB-CCCC" in body["text"]
    assert "#7" in body["text"]


async def test_webhook_error_status_raises():
    notifier = WebhookEmailNotifier(
        WEBHOOK_URL, "hello@foundingcircle.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )
    with pytest.raises(httpx.HTTPStatusError):
        await notifier.notify_welcome_with_code("ada@example.com", "OSIA-AAAA-BBBB-CCCC", 1)


async def test_logging_notifier_is_silent():
    await LoggingEmailNotifier().notify_welcome_with_code(
        "ada@example.com", "OSIA-AAAA-BBBB-CCCC", 1,
    )


def test_access_code_text():
    text = compose_access_code_text("OSIA-AAAA-BBBB-CCCC", 12)
    assert text.startswith("Congratulations, Founding Member #12!")
    assert "OSIA-AAAA-BBBB-CCCC" in text
