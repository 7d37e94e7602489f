"""Access rules for /groups.

Members add and remove only themselves, admins manage the admin list and
the group's details, and any member may register one of the group's own
hangouts under it.
"""

from __future__ import annotations

from typing import Any, Callable

from chill.core import constants as c

from . import schema
from .base import ALLOW, Decision, RuleContext, changed_keys, deny, entry_of

EntryRule = Callable[[RuleContext, str, dict, dict], Decision]


def is_member(group: Any, uid: str) -> bool:
    return entry_of(group, c.GROUP_MEMBERS, uid) is True


def is_admin(group: Any, uid: str) -> bool:
    return entry_of(group, c.GROUP_ADMINS, uid) is True


def can_read(ctx: RuleContext) -> Decision:
    """Single groups are readable by any signed-in user, the collection is not."""
    if len(ctx.path) < 2:
        return deny("the groups collection cannot be listed")
    return ALLOW


def can_write(ctx: RuleContext) -> Decision:
    if len(ctx.path) < 2:
        return deny("the groups collection cannot be written")

    before, after = ctx.entity()
    if before is None and after is None:
        return deny("group does not exist")
    if before is None:
        return _can_create(ctx, after)
    if after is None:
        return _can_delete(ctx, before)
    if ctx.field is None:
        return _can_replace(ctx, before, after)
    return _can_change_field(ctx, ctx.field, ctx.entry, before, after)


def _can_create(ctx: RuleContext, group: Any) -> Decision:
    return schema.validate_group(group)


def _can_delete(ctx: RuleContext, group: dict) -> Decision:
    if not is_admin(group, ctx.caller):
        return deny("only admins can delete a group")
    return ALLOW


def _can_replace(ctx: RuleContext, before: dict, after: dict) -> Decision:
    if not is_admin(before, ctx.caller):
        return deny("only admins can edit a group")
    for field in changed_keys(before, after):
        decision = _can_change_field(ctx, field, None, before, after)
        if not decision:
            return decision
    return ALLOW


def _can_change_field(
    ctx: RuleContext, field: str, key: str | None, before: dict, after: dict
) -> Decision:
    rule = ENTRY_RULES.get(field)
    if rule is not None:
        if key is not None:
            return rule(ctx, key, before, after)
        for changed in changed_keys(before.get(field), after.get(field)):
            decision = rule(ctx, changed, before, after)
            if not decision:
                return decision
        return ALLOW

    check = schema.GROUP_EDITABLE_FIELDS.get(field)
    if check is None:
        return deny(f"{field} cannot be changed")
    if not is_admin(before, ctx.caller):
        return deny("only admins can edit a group")
    value = after.get(field)
    if value is None:
        if field == c.GROUP_NAME:
            return deny("a group needs a name")
        return ALLOW
    if not check(value):
        return deny(f"group field {field} has the wrong type")
    return ALLOW


def _member_entry(ctx: RuleContext, uid: str, before: dict, after: dict) -> Decision:
    if ctx.caller != uid:
        return deny("members may only add or remove themselves")
    value = entry_of(after, c.GROUP_MEMBERS, uid)
    if value is not None and not schema.is_bool(value):
        return deny("membership must be a boolean")
    return ALLOW


def _admin_entry(ctx: RuleContext, uid: str, before: dict, after: dict) -> Decision:
    if not is_admin(before, ctx.caller):
        return deny("only admins can change admins")
    value = entry_of(after, c.GROUP_ADMINS, uid)
    if value is None:
        return ALLOW
    if not schema.is_bool(value):
        return deny("admin flag must be a boolean")
    return ALLOW


def _hangout_entry(ctx: RuleContext, hangout_id: str, before: dict, after: dict) -> Decision:
    if not is_member(before, ctx.caller):
        return deny("only members can register hangouts")
    value = entry_of(after, c.GROUP_HANGOUTS, hangout_id)
    if value is None:
        hangout = ctx.new_data.get((c.HANGOUTS, hangout_id))
        if hangout is None or hangout.get(c.HANGOUT_CREATED_BY) == ctx.caller:
            return ALLOW
        return deny("only the creator can unlink a live hangout")
    if not schema.is_bool(value):
        return deny("hangout entries must be booleans")
    hangout = ctx.new_data.get((c.HANGOUTS, hangout_id))
    if not isinstance(hangout, dict) or hangout.get(c.HANGOUT_GROUP) != ctx.path[1]:
        return deny("only the group's own hangouts can be registered under it")
    return ALLOW


ENTRY_RULES: dict[str, EntryRule] = {
    c.GROUP_MEMBERS: _member_entry,
    c.GROUP_ADMINS: _admin_entry,
    c.GROUP_HANGOUTS: _hangout_entry,
}
