"""Shape validation for the values stored in each collection."""

from __future__ import annotations

from typing import Any, Callable

from chill.core import constants as c

from .base import ALLOW, Decision, deny

Check = Callable[[Any], bool]


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_bool_map(value: Any) -> bool:
    return isinstance(value, dict) and all(is_bool(v) for v in value.values())


def is_number_list(value: Any) -> bool:
    return isinstance(value, list) and all(is_number(v) for v in value)


def is_timestamp_key(key: str) -> bool:
    return key.isdigit()


def is_candidate_dates(value: Any) -> bool:
    """Map of epoch-millisecond strings to the uid who proposed them."""
    return isinstance(value, dict) and all(
        is_timestamp_key(k) and is_string(v) for k, v in value.items()
    )


def is_poll_selections(value: Any) -> bool:
    """Map of uid to the timestamps that user voted for."""
    return isinstance(value, dict) and all(is_number_list(v) for v in value.values())


def is_icon(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and set(value) == {"type", "value"}
        and value["type"] in ("material", "image")
        and is_string(value["value"])
    )


def check_fields(
    value: Any,
    required: dict[str, Check],
    optional: dict[str, Check] | None = None,
    label: str = "value",
) -> Decision:
    """Validate a map against required and optional typed fields.

    Keys outside both sets are rejected.
    """
    optional = optional or {}
    if not isinstance(value, dict):
        return deny(f"{label} must be a map")
    missing = [key for key in required if key not in value]
    if missing:
        return deny(f"{label} is missing {', '.join(missing)}")
    for key, item in value.items():
        check = required.get(key) or optional.get(key)
        if check is None:
            return deny(f"{label} has unexpected field {key}")
        if not check(item):
            return deny(f"{label} field {key} has the wrong type")
    return ALLOW


GROUP_CREATE_FIELDS: dict[str, Check] = {
    c.GROUP_NAME: is_string,
    c.GROUP_CREATED_AT: is_number,
    c.GROUP_MEMBERS: is_bool_map,
    c.GROUP_ADMINS: is_bool_map,
}

GROUP_EDITABLE_FIELDS: dict[str, Check] = {
    c.GROUP_NAME: is_string,
    c.GROUP_ICON: is_icon,
    c.GROUP_INFO: is_string,
}

HANGOUT_REQUIRED_FIELDS: dict[str, Check] = {
    c.HANGOUT_NAME: is_string,
    c.HANGOUT_CREATED_AT: is_number,
    c.HANGOUT_GROUP: is_string,
    c.HANGOUT_CREATED_BY: is_string,
    c.HANGOUT_CREATED_ANONYMOUSLY: is_bool,
}

HANGOUT_MUTABLE_FIELDS: dict[str, Check] = {
    c.HANGOUT_NAME: is_string,
    c.HANGOUT_CREATED_AT: is_number,
    c.HANGOUT_TIME: is_number,
    c.HANGOUT_POLL_IN_PROGRESS: is_bool,
    "minAttendees": is_number,
    "maxAttendees": is_number,
    "location": is_string,
    "info": is_string,
}

HANGOUT_OPTIONAL_FIELDS: dict[str, Check] = {
    **HANGOUT_MUTABLE_FIELDS,
    c.HANGOUT_CANDIDATE_DATES: is_candidate_dates,
    c.HANGOUT_POLL_SELECTIONS: is_poll_selections,
    c.HANGOUT_ATTENDEES: is_bool_map,
}

HANGOUT_IMMUTABLE_FIELDS = (
    c.HANGOUT_GROUP,
    c.HANGOUT_CREATED_BY,
    c.HANGOUT_CREATED_ANONYMOUSLY,
)

USER_FIELDS: dict[str, Check] = {
    c.USER_NAME: is_string,
    c.USER_HAS_SET_NAME: is_bool,
    c.USER_FCM_TOKEN: is_string,
    c.USER_NOTIFICATION_PREFERENCES: is_bool_map,
    c.USER_GROUPS: is_bool_map,
    "createdAt": is_number,
    "phoneNumber": is_string,
}


def validate_group(group: Any) -> Decision:
    """Validate a group creation payload: exactly the four mandatory fields."""
    return check_fields(group, GROUP_CREATE_FIELDS, label="group")


def validate_hangout(hangout: Any) -> Decision:
    """Validate a complete hangout value."""
    decision = check_fields(
        hangout, HANGOUT_REQUIRED_FIELDS, HANGOUT_OPTIONAL_FIELDS, label="hangout"
    )
    if not decision:
        return decision
    return validate_poll_state(hangout)


def validate_poll_state(hangout: dict[str, Any]) -> Decision:
    """A hangout is either waiting on a date poll or has a fixed time, not both."""
    if hangout.get(c.HANGOUT_POLL_IN_PROGRESS) and c.HANGOUT_TIME in hangout:
        return deny("a hangout with a running date poll cannot have a time")
    return ALLOW


def validate_user(user: Any) -> Decision:
    """Validate a user value."""
    return check_fields(user, {}, USER_FIELDS, label="user")
