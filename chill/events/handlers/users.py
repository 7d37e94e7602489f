"""Clean up after a deleted account."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chill.core import constants as c
from chill.errors import MalformedEventError

from . import registry
from .membership import plan_departure

if TYPE_CHECKING:
    from chill.events.registry import Event, HandlerContext

logger = logging.getLogger(__name__)


@registry.on_deleted("users/{userId}")
def clean_up_deleted_user(event: Event, ctx: HandlerContext) -> None:
    """Remove a deleted user from every group and hangout they were part of.

    Groups come from the deleted node's own index. All writes are sent as
    one multi-path update; if it fails the handler is retried and the
    update recomputed from current state.
    """
    uid = event.params["userId"]
    user = event.before
    if not isinstance(user, dict):
        raise MalformedEventError(f"Deleted user {uid} left no data")
    if ctx.store.get(f"/{c.USERS}/{uid}") is not None:
        logger.warning(f"User {uid} still exists; skipping account cleanup")
        return

    group_ids = [gid for gid, flag in (user.get(c.USER_GROUPS) or {}).items() if flag]
    updates: dict[str, Any] = {}
    for group_id in group_ids:
        group = ctx.store.get(f"/{c.GROUPS}/{group_id}")
        if not isinstance(group, dict):
            continue
        group_updates, deleted = plan_departure(group_id, group, uid)
        updates.update(group_updates)
        if deleted:
            continue

        for hangout_id in group.get(c.GROUP_HANGOUTS) or {}:
            hangout = ctx.store.get(f"/{c.HANGOUTS}/{hangout_id}")
            if not isinstance(hangout, dict) or hangout.get(c.HANGOUT_GROUP) != group_id:
                continue
            prefix = f"{c.HANGOUTS}/{hangout_id}"
            if uid in (hangout.get(c.HANGOUT_ATTENDEES) or {}):
                updates[f"{prefix}/{c.HANGOUT_ATTENDEES}/{uid}"] = None
            if uid in (hangout.get(c.HANGOUT_POLL_SELECTIONS) or {}):
                updates[f"{prefix}/{c.HANGOUT_POLL_SELECTIONS}/{uid}"] = None

    if not updates:
        logger.info(f"User {uid} deleted with nothing to clean up")
        return
    ctx.store.update("/", updates)
    logger.info(f"Cleaned up {len(updates)} location(s) after deleting user {uid}")
