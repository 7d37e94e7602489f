"""Service layer for the signed-in user's own profile."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chill.core import constants as c
from chill.errors import NotFoundError, ValidationError
from chill.utils import now_ms

if TYPE_CHECKING:
    from chill.store import GuardedStore


class UserService:
    """Reads and writes ``/users/{uid}`` as its owner."""

    @staticmethod
    def _path(uid: str, *parts: str) -> str:
        return "/".join(("", c.USERS, uid, *parts))

    @staticmethod
    def get_profile(gateway: GuardedStore, uid: str) -> dict[str, Any]:
        """Fetch the caller's own user node."""
        user = gateway.read(uid, UserService._path(uid))
        if user is None:
            raise NotFoundError("User not found.")
        user["id"] = uid
        return user

    @staticmethod
    def get_display_name(gateway: GuardedStore, uid: str, other_uid: str) -> str | None:
        """Read another user's display name."""
        return gateway.read(uid, UserService._path(other_uid, c.USER_NAME))

    @staticmethod
    def save_profile(gateway: GuardedStore, uid: str, name: str) -> None:
        """Set the display name, creating the user node on first use."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Please enter a name.")
        updates: dict[str, Any] = {c.USER_NAME: name, c.USER_HAS_SET_NAME: True}
        if gateway.read(uid, UserService._path(uid, "createdAt")) is None:
            updates["createdAt"] = now_ms()
        gateway.update(uid, UserService._path(uid), updates)

    @staticmethod
    def register_token(gateway: GuardedStore, uid: str, token: str | None) -> None:
        """Store (or clear) the device token notifications go to."""
        gateway.set(uid, UserService._path(uid, c.USER_FCM_TOKEN), token or None)

    @staticmethod
    def set_notification_preference(
        gateway: GuardedStore, uid: str, group_id: str, enabled: bool
    ) -> None:
        """Turn notifications for one group on or off."""
        gateway.set(
            uid,
            UserService._path(uid, c.USER_NOTIFICATION_PREFERENCES, group_id),
            bool(enabled),
        )

    @staticmethod
    def delete_account(gateway: GuardedStore, uid: str) -> None:
        """Delete the caller's user node; memberships are cleaned up afterwards."""
        gateway.delete(uid, UserService._path(uid))
