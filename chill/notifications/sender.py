"""Deliver notification payloads through Firebase Cloud Messaging."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from firebase_admin import messaging

from chill.core import constants as c

if TYPE_CHECKING:
    from firebase_admin import App

    from .payloads import NotificationPayload

logger = logging.getLogger(__name__)


@dataclass
class DeliveryReport:
    """How a fan-out went: a success count and the failed tokens with errors."""

    sent: int = 0
    failed: list[tuple[str, str]] = field(default_factory=list)


class Messenger:
    """Sends one message per token, in chunks ``send_each`` accepts.

    Failures are logged per token and never raised: stale tokens are
    expected, and retrying a whole fan-out would duplicate notifications.
    """

    def __init__(
        self,
        app: App | None = None,
        channel_id: str = c.DEFAULT_CHANNEL_ID,
        click_action: str = c.DEFAULT_CLICK_ACTION,
    ) -> None:
        self._app = app
        self.channel_id = channel_id
        self.click_action = click_action

    def send(self, payload: NotificationPayload, tokens: list[str]) -> DeliveryReport:
        """Send ``payload`` to every token."""
        report = DeliveryReport()
        for start in range(0, len(tokens), c.MESSAGING_BATCH_LIMIT):
            chunk = tokens[start : start + c.MESSAGING_BATCH_LIMIT]
            messages = [
                payload.to_message(token, self.channel_id, self.click_action)
                for token in chunk
            ]
            try:
                response = messaging.send_each(messages, app=self._app)
            except Exception as e:
                logger.error(f"Error sending notifications: {e}")
                report.failed.extend((token, str(e)) for token in chunk)
                continue

            for token, result in zip(chunk, response.responses):
                if result.success:
                    report.sent += 1
                else:
                    report.failed.append((token, str(result.exception)))

        logger.debug(f"Notifications sent: {report.sent}/{len(tokens)}")
        if report.failed:
            logger.error(f"Failed to send notifications: {report.failed}")
        return report
