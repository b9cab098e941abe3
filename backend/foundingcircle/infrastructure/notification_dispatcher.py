"""Notification Dispatcher — fire-and-forget delivery with its own error boundary.

Invariants:
    - dispatch() returns immediately; the caller never awaits delivery
    - Delivery failures are logged at WARNING and never re-raised
    - Pending tasks are strongly referenced until done (asyncio only keeps weak refs)
    - drain() waits for everything dispatched so far (shutdown, tests)

Design Decisions:
    - asyncio.create_task over FastAPI BackgroundTasks: the service is called from
      routes and scripts alike, and must not depend on a request object
    - CancelledError is not swallowed: shutdown cancellation still propagates
"""

import asyncio
import logging

from foundingcircle.core.repository_protocols import EmailNotifier
from foundingcircle.infrastructure.observability import mask_email

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Schedules EmailNotifier calls as detached background tasks."""

    def __init__(self, notifier: EmailNotifier):
        self._notifier = notifier
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def dispatch(self, email: str, access_code: str, queue_number: int) -> None:
        """Schedule an access-code email without waiting for it."""
        task = asyncio.create_task(
            self._deliver(email, access_code, queue_number),
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for all dispatched deliveries to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _deliver(self, email: str, access_code: str, queue_number: int) -> None:
        try:
            await self._notifier.notify_welcome_with_code(
                email, access_code, queue_number,
            )
        except Exception as e:
            logger.warning(
                f"Failed to send access code email to {mask_email(email)}: {e}",
                extra={"queue_number": queue_number},
            )
