"""Notification payloads and their conversion to FCM messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from firebase_admin import messaging

from chill.core import constants as c

from .timefmt import format_date, happening


@dataclass(frozen=True)
class NotificationPayload:
    """A title/body pair with the structured data block the app routes on."""

    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)

    def to_message(
        self,
        token: str,
        channel_id: str = c.DEFAULT_CHANNEL_ID,
        click_action: str = c.DEFAULT_CLICK_ACTION,
    ) -> messaging.Message:
        """Build the FCM message for one device token.

        Android and APNs settings are delivery hints only: high priority,
        a notification channel, and a default sound with a badge.
        """
        data = {**self.data, "click_action": click_action}
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=self.title, body=self.body),
            data={key: str(value) for key, value in data.items()},
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    click_action=click_action,
                    channel_id=channel_id,
                    icon="notification_icon",
                    color="#4CAF50",
                ),
            ),
            apns=messaging.APNSConfig(
                headers={"apns-priority": "10"},
                payload=messaging.APNSPayload(
                    aps=messaging.Aps(sound="default", badge=1, content_available=True)
                ),
            ),
        )


def new_hangout_payload(
    group_id: str,
    hangout_id: str,
    hangout: dict[str, Any],
    group_name: str | None,
    now_ms: float,
) -> NotificationPayload:
    """Announce a newly created hangout to the group."""
    group_name = group_name or c.DEFAULT_GROUP_NAME
    hangout_name = hangout.get(c.HANGOUT_NAME) or c.DEFAULT_HANGOUT_NAME
    when = happening(hangout.get(c.HANGOUT_TIME), now_ms)
    title = f"New Hangout in {group_name}!"
    body = f'"{hangout_name}" {when}'
    return NotificationPayload(
        title=title,
        body=body,
        data={
            "groupId": group_id,
            "hangoutId": hangout_id,
            "type": c.NOTIFICATION_NEW_HANGOUT,
            "title": title,
            "body": body,
        },
    )


def poll_closed_payload(
    group_id: str,
    hangout_id: str,
    hangout: dict[str, Any],
    group_name: str | None,
    now_ms: float,
) -> NotificationPayload:
    """Announce the date a poll settled on."""
    group_name = group_name or c.DEFAULT_GROUP_NAME
    hangout_name = hangout.get(c.HANGOUT_NAME) or c.DEFAULT_HANGOUT_NAME
    time_ms = hangout[c.HANGOUT_TIME]
    title = f"Date set in {group_name}!"
    body = (
        f'"{hangout_name}" {happening(time_ms, now_ms)} '
        f"({format_date(time_ms)})"
    )
    return NotificationPayload(
        title=title,
        body=body,
        data={
            "groupId": group_id,
            "hangoutId": hangout_id,
            "type": c.NOTIFICATION_POLL_CLOSED,
            "title": title,
            "body": body,
        },
    )
