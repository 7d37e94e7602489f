"""Tests for the Realtime Database store and the change feed."""

import copy
import unittest
from collections import defaultdict
from unittest.mock import MagicMock, patch

from chill.errors import PermissionDenied
from chill.events.handlers import registry
from chill.store import ChangeKind, GuardedStore
from chill.store.feed import ChangeFeed
from chill.store.firebase import RealtimeDatabaseStore
from tests.helpers import ADMIN_UID, GROUP_ID, MEMBER_UID, OTHER_UID, new_hangout, seed_data


def _event(event_type, path, data):
    event = MagicMock()
    event.event_type = event_type
    event.path = path
    event.data = data
    return event


class RealtimeDatabaseStoreTestCase(unittest.TestCase):
    """Test case for RealtimeDatabaseStore."""

    def setUp(self):
        patcher = patch("chill.store.firebase.db")
        self.mock_db = patcher.start()
        self.addCleanup(patcher.stop)
        self.ref = self.mock_db.reference.return_value
        self.store = RealtimeDatabaseStore()

    def test_get(self):
        self.ref.get.return_value = {"name": "G"}

        self.assertEqual(self.store.get("groups/g1/"), {"name": "G"})
        self.mock_db.reference.assert_called_with("/groups/g1", app=None)

    def test_set_none_deletes(self):
        self.store.set("/groups/g1", None)
        self.ref.delete.assert_called_once()
        self.ref.set.assert_not_called()

        self.store.set("/groups/g1/name", "G")
        self.ref.set.assert_called_once_with("G")

    def test_update_is_a_single_call(self):
        self.store.update("/", {"/hangouts/h1": None, "groups/g1/hangouts/h1/": None})

        self.mock_db.reference.assert_called_with("/", app=None)
        self.ref.update.assert_called_once_with(
            {"hangouts/h1": None, "groups/g1/hangouts/h1": None}
        )

    def test_view_reads_each_node_once(self):
        self.ref.get.return_value = {"name": "G", "members": {"u1": True}}
        view = self.store.view()
        self.ref.get.assert_not_called()

        self.assertTrue(view.get("/groups/g1/members/u1"))
        self.assertEqual(view.get("/groups/g1/name"), "G")

        self.assertEqual(self.ref.get.call_count, 1)
        self.mock_db.reference.assert_called_with("/groups/g1", app=None)


class CheckedWriteTestCase(unittest.TestCase):
    """Rule-checked writes against the Realtime Database."""

    def setUp(self):
        patcher = patch("chill.store.firebase.db")
        self.mock_db = patcher.start()
        self.addCleanup(patcher.stop)
        self.refs = defaultdict(MagicMock)
        self.mock_db.reference.side_effect = lambda path, app=None: self.refs[path]
        self.gateway = GuardedStore(RealtimeDatabaseStore())
        self.group = seed_data()["groups"][GROUP_ID]

    def _transaction_on(self, path, current):
        result = {}

        def transaction(update):
            result["value"] = update(copy.deepcopy(current))
            return result["value"]

        self.refs[path].transaction.side_effect = transaction
        return result

    def test_single_node_write_is_a_transaction(self):
        result = self._transaction_on(f"/groups/{GROUP_ID}", self.group)

        self.gateway.update(ADMIN_UID, f"/groups/{GROUP_ID}", {"name": "Renamed"})

        self.assertEqual(result["value"], dict(self.group, name="Renamed"))
        self.refs[f"/groups/{GROUP_ID}"].get.assert_not_called()
        self.refs["/"].update.assert_not_called()

    def test_transaction_checks_the_value_it_replaces(self):
        demoted = dict(self.group, admins={MEMBER_UID: True})
        self._transaction_on(f"/groups/{GROUP_ID}", demoted)

        with self.assertRaises(PermissionDenied):
            self.gateway.update(ADMIN_UID, f"/groups/{GROUP_ID}", {"name": "Renamed"})

    def test_transaction_deletes(self):
        result = self._transaction_on(f"/groups/{GROUP_ID}", self.group)

        self.gateway.delete(ADMIN_UID, f"/groups/{GROUP_ID}")

        self.assertIsNone(result["value"])

    def test_multi_node_update_is_checked_then_sent_once(self):
        self.refs[f"/groups/{GROUP_ID}"].get.return_value = self.group
        self.refs["/hangouts/new-hangout"].get.return_value = None
        hangout = new_hangout(MEMBER_UID)

        self.gateway.update(
            MEMBER_UID,
            "/",
            {
                "hangouts/new-hangout": hangout,
                f"groups/{GROUP_ID}/hangouts/new-hangout": True,
            },
        )

        self.assertEqual(self.refs[f"/groups/{GROUP_ID}"].get.call_count, 1)
        self.refs["/"].update.assert_called_once_with(
            {
                "hangouts/new-hangout": hangout,
                f"groups/{GROUP_ID}/hangouts/new-hangout": True,
            }
        )

    def test_denied_multi_node_update_sends_nothing(self):
        self.refs[f"/groups/{GROUP_ID}"].get.return_value = self.group
        self.refs["/hangouts/new-hangout"].get.return_value = None

        with self.assertRaises(PermissionDenied):
            self.gateway.update(
                OTHER_UID,
                "/",
                {
                    "hangouts/new-hangout": new_hangout(OTHER_UID),
                    f"groups/{GROUP_ID}/hangouts/new-hangout": True,
                },
            )

        self.refs["/"].update.assert_not_called()


class ChangeFeedTestCase(unittest.TestCase):
    """Test case for ChangeFeed."""

    def setUp(self):
        self.dispatcher = MagicMock()
        self.dispatcher.registry = registry
        self.feed = ChangeFeed(self.dispatcher)
        self.feed.on_event(
            "groups",
            _event(
                "put",
                "/",
                {"g1": {"name": "G", "members": {"u1": True}, "admins": {"u1": True}}},
            ),
        )

    def test_initial_snapshot_is_not_dispatched(self):
        self.dispatcher.dispatch.assert_not_called()

    def test_put_dispatches_changes(self):
        self.feed.on_event("groups", _event("put", "/g1/members/u2", True))

        (changes,) = self.dispatcher.dispatch.call_args[0]
        self.assertCountEqual(
            [(c.path, c.kind) for c in changes],
            [
                ("/groups/g1", ChangeKind.UPDATED),
                ("/groups/g1/members/u2", ChangeKind.CREATED),
            ],
        )

    def test_events_copy_only_the_written_value(self):
        with patch("chill.store.paths.copy.deepcopy", wraps=copy.deepcopy) as mock_deepcopy:
            self.feed.on_event("groups", _event("put", "/g1/members/u2", True))

        self.assertEqual([c.args[0] for c in mock_deepcopy.call_args_list], [True])

    def test_patch_dispatches_each_child(self):
        self.feed.on_event(
            "groups", _event("patch", "/g1", {"members/u1": None, "admins/u1": None})
        )

        (changes,) = self.dispatcher.dispatch.call_args[0]
        self.assertCountEqual(
            [(c.path, c.kind) for c in changes],
            [
                ("/groups/g1", ChangeKind.UPDATED),
                ("/groups/g1/members/u1", ChangeKind.DELETED),
            ],
        )

    def test_group_deletion_is_expanded(self):
        self.feed.on_event("groups", _event("put", "/g1", None))

        (changes,) = self.dispatcher.dispatch.call_args[0]
        self.assertCountEqual(
            [(c.path, c.kind) for c in changes],
            [
                ("/groups/g1", ChangeKind.DELETED),
                ("/groups/g1/members/u1", ChangeKind.DELETED),
            ],
        )

    def test_unchanged_data_dispatches_nothing(self):
        self.feed.on_event("groups", _event("put", "/g1/name", "G"))
        self.dispatcher.dispatch.assert_not_called()

    @patch("chill.store.feed.db")
    def test_start_and_stop(self, mock_db):
        feed = ChangeFeed(self.dispatcher, collections=["users", "groups"])

        feed.start()
        self.assertEqual(mock_db.reference.call_count, 2)
        mock_db.reference.assert_any_call("/users", app=None)

        registration = mock_db.reference.return_value.listen.return_value
        feed.stop()
        self.assertEqual(registration.close.call_count, 2)


if __name__ == "__main__":
    unittest.main()
