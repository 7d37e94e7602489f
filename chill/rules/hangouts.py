"""Access rules for /hangouts."""

from __future__ import annotations

from typing import Any

from chill.core import constants as c

from . import schema
from .base import ALLOW, Decision, RuleContext, changed_keys, deny, entry_of
from .groups import is_member


def _in_group(ctx: RuleContext, group_id: Any) -> bool:
    if not isinstance(group_id, str) or not group_id:
        return False
    return is_member(ctx.data.get((c.GROUPS, group_id)), ctx.caller)


def can_read(ctx: RuleContext) -> Decision:
    """Members of the hangout's group may read it."""
    if len(ctx.path) < 2:
        return deny("the hangouts collection cannot be listed")
    hangout = ctx.data.get(ctx.entity_path)
    if not isinstance(hangout, dict):
        return deny("hangout does not exist")
    if not _in_group(ctx, hangout.get(c.HANGOUT_GROUP)):
        return deny("only group members can read a hangout")
    return ALLOW


def can_write(ctx: RuleContext) -> Decision:
    if len(ctx.path) < 2:
        return deny("the hangouts collection cannot be written")

    before, after = ctx.entity()
    if before is None and after is None:
        return deny("hangout does not exist")
    if before is None:
        return _can_create(ctx, after)
    if after is None:
        return _can_delete(ctx, before)

    if not _in_group(ctx, before.get(c.HANGOUT_GROUP)):
        return deny("only group members can edit a hangout")
    if ctx.field is None:
        fields = changed_keys(before, after)
    else:
        fields = [ctx.field]
    for field in fields:
        decision = _can_change_field(ctx, field, ctx.entry, before, after)
        if not decision:
            return decision
    if not isinstance(after, dict):
        return deny("a hangout must be a map")
    return schema.validate_poll_state(after)


def _can_create(ctx: RuleContext, hangout: Any) -> Decision:
    decision = schema.validate_hangout(hangout)
    if not decision:
        return decision
    if not _in_group(ctx, hangout[c.HANGOUT_GROUP]):
        return deny("only group members can create a hangout in the group")
    if (
        ctx.options.enforce_hangout_creator
        and hangout[c.HANGOUT_CREATED_BY] != ctx.caller
    ):
        return deny("createdBy must name the caller")
    for field in (c.HANGOUT_ATTENDEES, c.HANGOUT_POLL_SELECTIONS):
        others = set(hangout.get(field) or {}) - {ctx.caller}
        if others:
            return deny(f"{field} may only name the caller")
    return ALLOW


def _can_delete(ctx: RuleContext, hangout: dict) -> Decision:
    if hangout.get(c.HANGOUT_CREATED_BY) != ctx.caller:
        return deny("only the creator can delete a hangout")
    if ctx.options.restrict_attended_hangout_delete:
        attending = {
            uid for uid, flag in (hangout.get(c.HANGOUT_ATTENDEES) or {}).items() if flag
        }
        if attending - {ctx.caller}:
            return deny("a hangout others attend cannot be deleted")
    return ALLOW


def _can_change_field(
    ctx: RuleContext, field: str, key: str | None, before: dict, after: dict
) -> Decision:
    if field in schema.HANGOUT_IMMUTABLE_FIELDS:
        if before.get(field) != after.get(field):
            return deny(f"{field} cannot be changed")
        return ALLOW

    if field in (c.HANGOUT_ATTENDEES, c.HANGOUT_POLL_SELECTIONS, c.HANGOUT_CANDIDATE_DATES):
        keys = [key] if key is not None else changed_keys(before.get(field), after.get(field))
        for changed in keys:
            decision = _can_change_entry(ctx, field, changed, before, after)
            if not decision:
                return decision
        return ALLOW

    check = schema.HANGOUT_MUTABLE_FIELDS.get(field)
    if check is None:
        return deny(f"{field} is not a hangout field")
    value = after.get(field)
    if value is None:
        if field in schema.HANGOUT_REQUIRED_FIELDS:
            return deny(f"a hangout needs {field}")
        return ALLOW
    if not check(value):
        return deny(f"hangout field {field} has the wrong type")
    return ALLOW


def _can_change_entry(
    ctx: RuleContext, field: str, key: str, before: dict, after: dict
) -> Decision:
    value = entry_of(after, field, key)

    if field == c.HANGOUT_CANDIDATE_DATES:
        if not schema.is_timestamp_key(key):
            return deny("candidate dates are keyed by epoch milliseconds")
        if value is None:
            if entry_of(before, field, key) not in (None, ctx.caller):
                return deny("only the proposer can withdraw a candidate date")
            return ALLOW
        if value != ctx.caller and value != entry_of(before, field, key):
            return deny("a candidate date must name its proposer")
        return ALLOW

    if key != ctx.caller:
        return deny(f"{field} may only be changed for the caller")
    if value is None:
        return ALLOW
    if field == c.HANGOUT_ATTENDEES and not schema.is_bool(value):
        return deny("attendance must be a boolean")
    if field == c.HANGOUT_POLL_SELECTIONS and not schema.is_number_list(value):
        return deny("poll selections must be a list of timestamps")
    return ALLOW
