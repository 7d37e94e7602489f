"""Tests for the gateway blueprint."""

import unittest

from tests.app_helpers import AppTestCase
from tests.helpers import (
    ADMIN_UID,
    DAY_MS,
    GROUP_ID,
    HANGOUT_ID,
    MEMBER_UID,
    NOW,
    OTHER_UID,
    TEST_UID,
    new_group,
)


class GatewayRoutesTestCase(AppTestCase):
    """Test case for path-addressed store access."""

    def test_read_hangout_as_member(self):
        self._login(MEMBER_UID)

        response = self.client.get(f"/db/hangouts/{HANGOUT_ID}", headers=self._auth_headers())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["name"], "Test Hangout")

    def test_read_hangout_as_outsider(self):
        self._login(OTHER_UID)

        response = self.client.get(f"/db/hangouts/{HANGOUT_ID}", headers=self._auth_headers())

        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.get_json(), {"status": "error", "message": "Permission denied."}
        )

    def test_anonymous_requests_are_denied(self):
        response = self.client.get(f"/db/users/{TEST_UID}/name")
        self.assertEqual(response.status_code, 403)

    def test_invalid_token(self):
        self.mocks["verify_id_token"].side_effect = ValueError("expired")

        response = self.client.get(f"/db/users/{TEST_UID}", headers=self._auth_headers())

        self.assertEqual(response.status_code, 401)

    def test_root_cannot_be_read(self):
        self._login(ADMIN_UID)
        response = self.client.get("/db/", headers=self._auth_headers())
        self.assertEqual(response.status_code, 403)

    def test_create_group(self):
        self._login(TEST_UID)
        payload = new_group(TEST_UID)

        response = self.client.put(
            "/db/groups/new-group", json=payload, headers=self._auth_headers()
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.state.store.get("/groups/new-group"), payload)
        self.assertTrue(self.state.store.get(f"/users/{TEST_UID}/groups/new-group"))

    def test_rejected_patch_changes_nothing(self):
        self._login(MEMBER_UID)

        response = self.client.patch(
            f"/db/hangouts/{HANGOUT_ID}",
            json={"name": "New Name", "group": "new-group-id"},
            headers=self._auth_headers(),
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            self.state.store.get(f"/hangouts/{HANGOUT_ID}/name"), "Test Hangout"
        )

    def test_patch(self):
        self._login(MEMBER_UID)

        response = self.client.patch(
            f"/db/hangouts/{HANGOUT_ID}",
            json={"name": "Edited", "location": "Lake"},
            headers=self._auth_headers(),
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.state.store.get(f"/hangouts/{HANGOUT_ID}/location"), "Lake")

    def test_write_needs_json(self):
        self._login(TEST_UID)

        response = self.client.put(
            f"/db/users/{TEST_UID}/name", data="Sam", headers=self._auth_headers()
        )

        self.assertEqual(response.status_code, 400)

    def test_delete_account_cleans_up(self):
        self._login(ADMIN_UID)

        response = self.client.delete(f"/db/users/{ADMIN_UID}", headers=self._auth_headers())

        self.assertEqual(response.status_code, 200)
        group = self.state.store.get(f"/groups/{GROUP_ID}")
        self.assertEqual(group["members"], {MEMBER_UID: True})
        self.assertEqual(group["admins"], {MEMBER_UID: True})

    def test_close_poll(self):
        self.state.store.update(
            f"/hangouts/{HANGOUT_ID}",
            {
                "datetimePollInProgress": True,
                f"candidateDates/{NOW + DAY_MS}": MEMBER_UID,
            },
        )
        self._login(ADMIN_UID)

        response = self.client.post(
            f"/db/hangouts/{HANGOUT_ID}/close-poll", headers=self._auth_headers()
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"status": "success", "time": NOW + DAY_MS})
        self.mocks["send_each"].assert_called_once()

    def test_close_poll_requires_sign_in(self):
        response = self.client.post(f"/db/hangouts/{HANGOUT_ID}/close-poll")
        self.assertEqual(response.status_code, 401)

    def test_close_poll_without_poll(self):
        self._login(ADMIN_UID)

        response = self.client.post(
            f"/db/hangouts/{HANGOUT_ID}/close-poll", headers=self._auth_headers()
        )

        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
