"""Reactions to hangouts being created, deleted, or having their poll closed."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chill.core import constants as c
from chill.errors import MalformedEventError
from chill.notifications import (
    new_hangout_payload,
    poll_closed_payload,
    resolve_tokens,
)
from chill.rules.schema import is_number

from . import registry

if TYPE_CHECKING:
    from chill.events.registry import Event, HandlerContext
    from chill.notifications import NotificationPayload

logger = logging.getLogger(__name__)


def _group_of(hangout_id: str, hangout: object) -> str:
    if not isinstance(hangout, dict):
        raise MalformedEventError(f"Invalid data for hangout {hangout_id}")
    group_id = hangout.get(c.HANGOUT_GROUP)
    if not group_id or not isinstance(group_id, str):
        raise MalformedEventError(f"Hangout {hangout_id} has no group")
    return group_id


def _notify_group(
    ctx: HandlerContext, group_id: str, build_payload
) -> None:
    tokens = resolve_tokens(ctx.store, group_id)
    if not tokens:
        logger.debug(f"No FCM tokens to notify for group {group_id}")
        return
    group_name = ctx.store.get(f"/{c.GROUPS}/{group_id}/{c.GROUP_NAME}")
    payload: NotificationPayload = build_payload(group_name)
    ctx.messenger.send(payload, tokens)


@registry.on_created("hangouts/{hangoutId}")
def notify_group_subscribers(event: Event, ctx: HandlerContext) -> None:
    """Tell subscribed group members about a new hangout."""
    hangout_id = event.params["hangoutId"]
    logger.info(f"New hangout created - ID: {hangout_id}")
    hangout = event.after
    group_id = _group_of(hangout_id, hangout)
    _notify_group(
        ctx,
        group_id,
        lambda group_name: new_hangout_payload(
            group_id, hangout_id, hangout, group_name, ctx.clock()
        ),
    )


@registry.on_written("hangouts/{hangoutId}/datetimePollInProgress")
def notify_poll_closed(event: Event, ctx: HandlerContext) -> None:
    """Announce the chosen date once a hangout's date poll is closed."""
    if not event.before or event.after:
        return
    hangout_id = event.params["hangoutId"]
    hangout = ctx.store.get(f"/{c.HANGOUTS}/{hangout_id}")
    if hangout is None:
        logger.info(f"Hangout {hangout_id} was deleted; no poll result to announce")
        return
    group_id = _group_of(hangout_id, hangout)
    if not is_number(hangout.get(c.HANGOUT_TIME)):
        raise MalformedEventError(f"Hangout {hangout_id} closed its poll without a time")
    _notify_group(
        ctx,
        group_id,
        lambda group_name: poll_closed_payload(
            group_id, hangout_id, hangout, group_name, ctx.clock()
        ),
    )


@registry.on_created("hangouts/{hangoutId}")
def link_hangout_to_group(event: Event, ctx: HandlerContext) -> None:
    """Make sure a new hangout is listed under its group."""
    hangout_id = event.params["hangoutId"]
    group_id = _group_of(hangout_id, event.after)
    if ctx.store.get(f"/{c.GROUPS}/{group_id}/{c.GROUP_NAME}") is None:
        logger.warning(f"Hangout {hangout_id} points at missing group {group_id}")
        return
    entry = f"/{c.GROUPS}/{group_id}/{c.GROUP_HANGOUTS}/{hangout_id}"
    if ctx.store.get(entry) is not True:
        ctx.store.set(entry, True)


@registry.on_deleted("hangouts/{hangoutId}")
def unlink_hangout_from_group(event: Event, ctx: HandlerContext) -> None:
    """Drop a deleted hangout from its group's list."""
    hangout_id = event.params["hangoutId"]
    group_id = _group_of(hangout_id, event.before)
    if ctx.store.get(f"/{c.HANGOUTS}/{hangout_id}") is not None:
        logger.warning(f"Hangout {hangout_id} still exists; leaving it listed")
        return
    entry = f"/{c.GROUPS}/{group_id}/{c.GROUP_HANGOUTS}/{hangout_id}"
    if ctx.store.get(entry) is not None:
        ctx.store.delete(entry)
        logger.info(f"Unlinked hangout {hangout_id} from group {group_id}")
