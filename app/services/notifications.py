"""Owner notifications via Resend, dispatched without blocking the caller."""

from __future__ import annotations

import asyncio
import logging

from app.config import Settings

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self, settings: Settings):
        self._settings = settings
        self._pending: set[asyncio.Task] = set()

    def _send(self, subject: str, body: str) -> bool:
        """Send an email to the business owner. Returns True on success."""
        if not self._settings.resend_api_key or not self._settings.notify_email:
            logger.info("Notification not sent (email not configured): %s", subject)
            return False

        import resend
        resend.api_key = self._settings.resend_api_key

        try:
            resend.Emails.send({
                "from": self._settings.email_from,
                "to": [self._settings.notify_email],
                "subject": subject,
                "html": f"<p>{body}</p>",
            })
            return True
        except Exception:
            logger.exception("Failed to send notification: %s", subject)
            return False

    def notify(self, subject: str, body: str) -> None:
        """Fire and forget: the send runs in a worker thread, the caller never waits."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no running loop (CLI)
            self._send(subject, body)
            return
        task = loop.create_task(asyncio.to_thread(self._send, subject, body))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for in-flight sends (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
