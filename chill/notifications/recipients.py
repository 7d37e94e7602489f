"""Resolve which devices should hear about activity in a group."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chill.core import constants as c

if TYPE_CHECKING:
    from chill.store import Store

logger = logging.getLogger(__name__)


def subscribed_members(store: Store, group_id: str) -> list[str]:
    """Return members whose notification preference for the group is on."""
    members = store.get(f"/{c.GROUPS}/{group_id}/{c.GROUP_MEMBERS}") or {}
    subscribed = []
    for member_id, is_member in members.items():
        if not is_member:
            continue
        enabled = store.get(
            f"/{c.USERS}/{member_id}/{c.USER_NOTIFICATION_PREFERENCES}/{group_id}"
        )
        if enabled is True:
            subscribed.append(member_id)
    logger.debug(f"Subscribed members of {group_id}: {subscribed}")
    return subscribed


def resolve_tokens(store: Store, group_id: str) -> list[str]:
    """Return the device tokens of the group's subscribed members."""
    tokens = []
    for member_id in subscribed_members(store, group_id):
        token = store.get(f"/{c.USERS}/{member_id}/{c.USER_FCM_TOKEN}")
        if token:
            tokens.append(token)
    return list(dict.fromkeys(tokens))
