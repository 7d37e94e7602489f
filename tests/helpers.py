"""Shared data and wiring for the tests."""

import copy
from unittest.mock import MagicMock

from chill.events.dispatcher import EventDispatcher
from chill.events.handlers import registry
from chill.events.registry import HandlerContext
from chill.store import GuardedStore, MemoryStore

NOW = 1_700_000_000_000
DAY_MS = 24 * 60 * 60 * 1000

TEST_UID = "test-user-123"
OTHER_UID = "other-user-456"
ADMIN_UID = "test-group-admin-123"
MEMBER_UID = "test-group-member-123"
GROUP_ID = "test-group-123"
HANGOUT_ID = "test-hangout-123"

ADMIN_TOKEN = "admin-device-token"
MEMBER_TOKEN = "member-device-token"


def seed_data():
    """A group with an admin and a member, and one hangout created by the member."""
    return copy.deepcopy(
        {
            "users": {
                TEST_UID: {"name": "Test User", "createdAt": NOW},
                OTHER_UID: {"name": "Other User", "createdAt": NOW},
                ADMIN_UID: {
                    "name": "Test Group Admin",
                    "createdAt": NOW,
                    "fcmToken": ADMIN_TOKEN,
                    "groups": {GROUP_ID: True},
                    "notificationPreferences": {GROUP_ID: True},
                },
                MEMBER_UID: {
                    "name": "Test Group Member",
                    "createdAt": NOW,
                    "fcmToken": MEMBER_TOKEN,
                    "groups": {GROUP_ID: True},
                    "notificationPreferences": {GROUP_ID: True},
                },
            },
            "groups": {
                GROUP_ID: {
                    "name": "Test Group",
                    "createdAt": NOW,
                    "members": {ADMIN_UID: True, MEMBER_UID: True},
                    "admins": {ADMIN_UID: True},
                    "hangouts": {HANGOUT_ID: True},
                }
            },
            "hangouts": {
                HANGOUT_ID: {
                    "name": "Test Hangout",
                    "createdAt": NOW,
                    "group": GROUP_ID,
                    "createdBy": MEMBER_UID,
                    "createdAnonymously": False,
                }
            },
        }
    )


def new_group(uid):
    """A valid group creation payload with ``uid`` as member and admin."""
    return {
        "name": "New Group",
        "createdAt": NOW,
        "members": {uid: True},
        "admins": {uid: True},
    }


def new_hangout(uid, group_id=GROUP_ID):
    """A valid hangout creation payload."""
    return {
        "name": "New Hangout",
        "createdAt": NOW,
        "group": group_id,
        "createdBy": uid,
        "createdAnonymously": False,
    }


def make_engine(data=None, messenger=None, options=None):
    """Build a memory store with the handlers attached inline.

    Returns ``(store, gateway, messenger)``; the messenger is a mock unless
    one is given.
    """
    store = MemoryStore(seed_data() if data is None else data)
    messenger = messenger or MagicMock()
    dispatcher = EventDispatcher(
        registry,
        HandlerContext(store=store, messenger=messenger, clock=lambda: NOW),
        inline=True,
        retry_delay=0,
    )
    dispatcher.attach(store)
    return store, GuardedStore(store, options), messenger
