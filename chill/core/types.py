"""Core data types for the chill application."""

from typing import Dict, List, Literal, TypedDict  # noqa: UP035


class GroupIcon(TypedDict):
    """Icon shown for a group: a material icon name or an image URL."""

    type: Literal["material", "image"]
    value: str


class User(TypedDict, total=False):
    """A user node under /users/{uid}."""

    name: str
    hasSetName: bool
    fcmToken: str
    createdAt: int
    phoneNumber: str
    notificationPreferences: Dict[str, bool]  # noqa: UP006
    groups: Dict[str, bool]  # noqa: UP006


class Group(TypedDict, total=False):
    """A group node under /groups/{groupId}."""

    name: str
    createdAt: int
    icon: GroupIcon
    info: str
    hangouts: Dict[str, bool]  # noqa: UP006
    admins: Dict[str, bool]  # noqa: UP006
    members: Dict[str, bool]  # noqa: UP006


class Hangout(TypedDict, total=False):
    """A hangout node under /hangouts/{hangoutId}."""

    name: str
    group: str
    createdAt: int
    createdBy: str
    createdAnonymously: bool
    time: int
    datetimePollInProgress: bool
    candidateDates: Dict[str, str]  # noqa: UP006
    datePollSelections: Dict[str, List[int]]  # noqa: UP006
    attendees: Dict[str, bool]  # noqa: UP006
    minAttendees: int
    maxAttendees: int
    location: str
    info: str
