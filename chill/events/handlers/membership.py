"""Keep the user -> group index in step with group membership.

Clients write ``groups/{groupId}/members/{uid}`` (self-join, self-leave);
only these handlers write ``users/{uid}/groups/{groupId}``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chill.core import constants as c
from chill.rules.base import entry_of

from . import registry

if TYPE_CHECKING:
    from chill.events.registry import Event, HandlerContext

logger = logging.getLogger(__name__)


def plan_departure(group_id: str, group: dict[str, Any], uid: str) -> tuple[dict[str, Any], bool]:
    """Compute the writes that take ``uid`` out of a group.

    Returns the multi-path updates (relative to the root) and whether the
    group itself is being deleted. A group left without members is deleted;
    a group left without admins gets its first remaining member promoted.
    """
    members = {m for m, flag in (group.get(c.GROUP_MEMBERS) or {}).items() if flag}
    admins = {a for a, flag in (group.get(c.GROUP_ADMINS) or {}).items() if flag}
    prefix = f"{c.GROUPS}/{group_id}"

    remaining = sorted(members - {uid})
    if not remaining:
        logger.info(f"Group {group_id} has no members left; deleting it")
        return {prefix: None}, True

    updates: dict[str, Any] = {
        f"{prefix}/{c.GROUP_MEMBERS}/{uid}": None,
        f"{prefix}/{c.GROUP_ADMINS}/{uid}": None,
    }
    if not admins - {uid}:
        successor = remaining[0]
        logger.info(f"Promoting {successor} to admin of group {group_id}")
        updates[f"{prefix}/{c.GROUP_ADMINS}/{successor}"] = True
    return updates, False


@registry.on_written("groups/{groupId}/members/{userId}")
def index_new_membership(event: Event, ctx: HandlerContext) -> None:
    """Record the group on the user and default its notifications to on."""
    if event.after is not True:
        return
    group_id, uid = event.params["groupId"], event.params["userId"]
    user_path = f"/{c.USERS}/{uid}"

    ctx.store.set(f"{user_path}/{c.USER_GROUPS}/{group_id}", True)
    preference = f"{user_path}/{c.USER_NOTIFICATION_PREFERENCES}/{group_id}"
    try:
        if ctx.store.get(preference) is None:
            ctx.store.set(preference, True)
    except Exception as e:
        logger.error(f"Could not default notifications for {uid} in {group_id}: {e}")
    logger.info(f"Indexed membership of {uid} in group {group_id}")


@registry.on_written("groups/{groupId}/members/{userId}")
def clean_up_membership(event: Event, ctx: HandlerContext) -> None:
    """Remove the index entry and keep the group's admin invariant."""
    if event.before is not True or event.after is True:
        return
    group_id, uid = event.params["groupId"], event.params["userId"]

    group = ctx.store.get(f"/{c.GROUPS}/{group_id}")
    if entry_of(group, c.GROUP_MEMBERS, uid) is True:
        logger.info(f"{uid} is a member of group {group_id} again; nothing to clean up")
        return
    updates: dict[str, Any] = {f"{c.USERS}/{uid}/{c.USER_GROUPS}/{group_id}": None}
    if isinstance(group, dict):
        group_updates, _ = plan_departure(group_id, group, uid)
        updates.update(group_updates)
    ctx.store.update("/", updates)
    logger.info(f"Removed group {group_id} from user {uid}'s groups list")
