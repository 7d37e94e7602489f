"""Access rules for /users."""

from __future__ import annotations

from chill.core import constants as c

from . import schema
from .base import ALLOW, Decision, RuleContext, deny


def can_read(ctx: RuleContext) -> Decision:
    """Owners read their whole node; anyone signed in may read a display name."""
    if len(ctx.path) < 2:
        return deny("the users collection cannot be listed")
    if ctx.caller == ctx.path[1]:
        return ALLOW
    if ctx.path[2:] == (c.USER_NAME,):
        return ALLOW
    return deny("users may only read their own profile")


def can_write(ctx: RuleContext) -> Decision:
    """Owners write their own node, except the server-maintained group index."""
    if len(ctx.path) < 2:
        return deny("the users collection cannot be written")
    if ctx.caller != ctx.path[1]:
        return deny("users may only write their own profile")

    before, after = ctx.entity()
    if after is None:
        return ALLOW
    if ctx.field == c.USER_GROUPS:
        return deny("the group index is maintained by the server")
    if (before or {}).get(c.USER_GROUPS) != after.get(c.USER_GROUPS):
        return deny("the group index is maintained by the server")
    return schema.validate_user(after)
