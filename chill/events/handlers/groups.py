"""Cascade a group's deletion to its hangouts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chill.core import constants as c
from chill.errors import MalformedEventError

from . import registry

if TYPE_CHECKING:
    from chill.events.registry import Event, HandlerContext

logger = logging.getLogger(__name__)


def owned_hangouts(ctx: HandlerContext, group_id: str, hangout_ids) -> list[str]:
    """Return the listed hangouts that still exist and name ``group_id`` as their group."""
    owned = []
    for hangout_id in hangout_ids:
        hangout = ctx.store.get(f"/{c.HANGOUTS}/{hangout_id}")
        if not isinstance(hangout, dict):
            continue
        if hangout.get(c.HANGOUT_GROUP) != group_id:
            logger.warning(
                f"Group {group_id} lists hangout {hangout_id} of group "
                f"{hangout.get(c.HANGOUT_GROUP)}; leaving it alone"
            )
            continue
        owned.append(hangout_id)
    return owned


@registry.on_deleted("groups/{groupId}")
def delete_group_hangouts(event: Event, ctx: HandlerContext) -> None:
    """Delete every hangout the deleted group listed and owned."""
    group_id = event.params["groupId"]
    if not isinstance(event.before, dict):
        raise MalformedEventError(f"Deleted group {group_id} left no data")
    if ctx.store.get(f"/{c.GROUPS}/{group_id}") is not None:
        logger.warning(f"Group {group_id} still exists; not deleting its hangouts")
        return
    hangout_ids = owned_hangouts(ctx, group_id, event.before.get(c.GROUP_HANGOUTS) or {})
    if not hangout_ids:
        return
    ctx.store.update("/", {f"{c.HANGOUTS}/{hangout_id}": None for hangout_id in hangout_ids})
    logger.info(f"Deleted {len(hangout_ids)} hangout(s) of group {group_id}")
