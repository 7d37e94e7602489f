"""Push notifications for group activity."""

from .payloads import NotificationPayload, new_hangout_payload, poll_closed_payload
from .recipients import resolve_tokens
from .sender import DeliveryReport, Messenger

__all__ = [
    "DeliveryReport",
    "Messenger",
    "NotificationPayload",
    "new_hangout_payload",
    "poll_closed_payload",
    "resolve_tokens",
]
