"""Tests for the change event webhook."""

import unittest
from unittest.mock import patch

from tests.app_helpers import AppTestCase
from tests.helpers import ADMIN_UID, GROUP_ID, HANGOUT_ID, MEMBER_UID, seed_data


class WebhookTestCase(AppTestCase):
    """Test case for changes pushed by an external trigger runtime."""

    def _group_deleted(self):
        return {"path": f"/groups/{GROUP_ID}", "before": seed_data()["groups"][GROUP_ID], "after": None}

    def _remove_group(self):
        data = seed_data()
        del data["groups"][GROUP_ID]
        self.state.store.load(data)

    def test_change_runs_handlers(self):
        self._remove_group()

        response = self.client.post("/events", json=self._group_deleted())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.get_json(),
            {"status": "success", "handlers": {"delete_group_hangouts": True}},
        )
        self.assertIsNone(self.state.store.get(f"/hangouts/{HANGOUT_ID}"))

    def test_deletion_of_a_live_group_changes_nothing(self):
        response = self.client.post("/events", json=self._group_deleted())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.state.store.to_dict(), seed_data())

    def test_deletion_of_a_live_user_changes_nothing(self):
        response = self.client.post(
            "/events",
            json={
                "path": f"/users/{MEMBER_UID}",
                "before": {"groups": {GROUP_ID: True}},
                "after": None,
            },
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            self.state.store.get(f"/groups/{GROUP_ID}/members"),
            {ADMIN_UID: True, MEMBER_UID: True},
        )

    def test_unchanged_value_is_ignored(self):
        response = self.client.post(
            "/events", json={"path": f"/groups/{GROUP_ID}/name", "before": "A", "after": "A"}
        )

        self.assertEqual(response.get_json(), {"status": "ignored", "handlers": {}})

    def test_change_needs_path(self):
        response = self.client.post("/events", json={"before": None, "after": True})
        self.assertEqual(response.status_code, 400)

    def test_handler_failure_is_a_server_error(self):
        self._remove_group()

        with patch.object(self.state.store, "update", side_effect=RuntimeError("offline")):
            response = self.client.post("/events", json=self._group_deleted())

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.get_json(),
            {"status": "error", "handlers": {"delete_group_hangouts": False}},
        )

    def test_secret_is_required_outside_testing(self):
        self.app.testing = False
        self._remove_group()

        response = self.client.post("/events", json=self._group_deleted())

        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.state.store.get(f"/hangouts/{HANGOUT_ID}/group"), GROUP_ID)


class WebhookSecretTestCase(AppTestCase):
    """Test case for the shared secret on the webhook."""

    config = {"EVENTS_SHARED_SECRET": "s3cret"}

    def test_wrong_secret(self):
        response = self.client.post(
            "/events",
            json={"path": f"/groups/{GROUP_ID}/members/x", "before": None, "after": True},
            headers={"X-Chill-Events-Secret": "nope"},
        )
        self.assertEqual(response.status_code, 403)

    def test_right_secret(self):
        response = self.client.post(
            "/events",
            json={"path": f"/groups/{GROUP_ID}/members/new-user", "before": None, "after": True},
            headers={"X-Chill-Events-Secret": "s3cret"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(self.state.store.get(f"/users/new-user/groups/{GROUP_ID}"))

    def test_right_secret_outside_testing(self):
        self.app.testing = False

        response = self.client.post(
            "/events",
            json={"path": f"/groups/{GROUP_ID}/members/new-user", "before": None, "after": True},
            headers={"X-Chill-Events-Secret": "s3cret"},
        )

        self.assertEqual(response.status_code, 200)


if __name__ == "__main__":
    unittest.main()
