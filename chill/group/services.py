"""Service layer for group operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chill.core import constants as c
from chill.errors import NotFoundError, ValidationError
from chill.store.paths import generate_key
from chill.utils import now_ms

if TYPE_CHECKING:
    from chill.core.types import Group, GroupIcon
    from chill.store import GuardedStore


def _group_path(group_id: str, *parts: str) -> str:
    return "/".join(("", c.GROUPS, group_id, *parts))


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def create_group(gateway: GuardedStore, uid: str, name: str) -> str:
        """Create a group with the caller as its only member and admin."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("A group needs a name.")
        group_id = generate_key()
        group: Group = {
            "name": name,
            "createdAt": now_ms(),
            "members": {uid: True},
            "admins": {uid: True},
        }
        gateway.set(uid, _group_path(group_id), group)
        return group_id

    @staticmethod
    def get_group(gateway: GuardedStore, uid: str, group_id: str) -> dict[str, Any]:
        """Fetch a group, with its id."""
        group = gateway.read(uid, _group_path(group_id))
        if group is None:
            raise NotFoundError("Group not found.")
        group["id"] = group_id
        return group

    @staticmethod
    def join_group(gateway: GuardedStore, uid: str, group_id: str) -> None:
        """Add the caller to a group."""
        gateway.set(uid, _group_path(group_id, c.GROUP_MEMBERS, uid), True)

    @staticmethod
    def leave_group(gateway: GuardedStore, uid: str, group_id: str) -> None:
        """Remove the caller from a group."""
        gateway.delete(uid, _group_path(group_id, c.GROUP_MEMBERS, uid))

    @staticmethod
    def set_admin(
        gateway: GuardedStore, uid: str, group_id: str, member_id: str, is_admin: bool
    ) -> None:
        """Grant or revoke admin rights for a member."""
        path = _group_path(group_id, c.GROUP_ADMINS, member_id)
        if is_admin:
            gateway.set(uid, path, True)
        else:
            gateway.delete(uid, path)

    @staticmethod
    def update_details(
        gateway: GuardedStore,
        uid: str,
        group_id: str,
        name: str | None = None,
        icon: GroupIcon | None = None,
        info: str | None = None,
    ) -> None:
        """Change a group's name, icon, or info text."""
        updates: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("A group needs a name.")
            updates[c.GROUP_NAME] = name.strip()
        if icon is not None:
            updates[c.GROUP_ICON] = dict(icon)
        if info is not None:
            updates[c.GROUP_INFO] = info or None
        if not updates:
            raise ValidationError("Nothing to update.")
        gateway.update(uid, _group_path(group_id), updates)

    @staticmethod
    def delete_group(gateway: GuardedStore, uid: str, group_id: str) -> None:
        """Delete a group; its hangouts are removed by the event engine."""
        gateway.delete(uid, _group_path(group_id))
