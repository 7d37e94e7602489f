"""Tests for notification payloads, recipients, and delivery."""

import unittest
from unittest.mock import MagicMock, patch

from chill.notifications import (
    Messenger,
    NotificationPayload,
    new_hangout_payload,
    poll_closed_payload,
    resolve_tokens,
)
from chill.notifications.timefmt import describe_time, format_date, happening
from chill.store import MemoryStore
from tests.helpers import (
    ADMIN_TOKEN,
    ADMIN_UID,
    GROUP_ID,
    MEMBER_TOKEN,
    MEMBER_UID,
    NOW,
    seed_data,
)

MINUTE_MS = 60 * 1000


class TimeFormatTestCase(unittest.TestCase):
    """Test case for relative time phrasing."""

    def test_describe_time(self):
        self.assertEqual(describe_time(None, NOW), "soon")
        self.assertEqual(describe_time(NOW - 30 * 1000, NOW), "now")
        self.assertEqual(describe_time(NOW + 30 * 1000, NOW), "now")
        self.assertEqual(describe_time(NOW + MINUTE_MS, NOW), "in 1 minute")
        self.assertEqual(describe_time(NOW + 45 * MINUTE_MS, NOW), "in 45 minutes")
        self.assertEqual(describe_time(NOW + 60 * MINUTE_MS, NOW), "in 1 hour")
        self.assertEqual(describe_time(NOW + 26 * 60 * MINUTE_MS, NOW), "in 1 day")
        self.assertEqual(describe_time(NOW + 72 * 60 * MINUTE_MS, NOW), "in 3 days")

    def test_past_times(self):
        self.assertEqual(describe_time(NOW - MINUTE_MS, NOW), "1 minute ago")
        self.assertEqual(describe_time(NOW - 3 * 60 * MINUTE_MS, NOW), "3 hours ago")
        self.assertEqual(describe_time(NOW - 50 * 60 * MINUTE_MS, NOW), "2 days ago")
        self.assertEqual(happening(NOW - 50 * 60 * MINUTE_MS, NOW), "happened 2 days ago")
        self.assertEqual(happening(NOW + 5 * MINUTE_MS, NOW), "is happening in 5 minutes")
        self.assertEqual(happening(None, NOW), "is happening soon")

    def test_format_date(self):
        self.assertEqual(format_date(NOW), "Tue, Nov 14 at 22:13 UTC")


class PayloadTestCase(unittest.TestCase):
    """Test case for building payloads and messages."""

    def test_new_hangout_payload(self):
        payload = new_hangout_payload(
            GROUP_ID, "h1", {"name": "Hike", "time": NOW + 2 * 60 * MINUTE_MS}, "Walkers", NOW
        )
        self.assertEqual(payload.title, "New Hangout in Walkers!")
        self.assertEqual(payload.body, '"Hike" is happening in 2 hours')
        self.assertEqual(
            payload.data,
            {
                "groupId": GROUP_ID,
                "hangoutId": "h1",
                "type": "new_hangout",
                "title": payload.title,
                "body": payload.body,
            },
        )

    def test_defaults_for_missing_names(self):
        payload = new_hangout_payload(GROUP_ID, "h1", {}, None, NOW)
        self.assertEqual(payload.title, "New Hangout in your group!")
        self.assertEqual(payload.body, '"New hangout" is happening soon')

    def test_past_hangout_payload(self):
        payload = new_hangout_payload(
            GROUP_ID, "h1", {"name": "Hike", "time": NOW - 72 * 60 * MINUTE_MS}, "Walkers", NOW
        )
        self.assertEqual(payload.body, '"Hike" happened 3 days ago')

    def test_poll_closed_payload(self):
        payload = poll_closed_payload(GROUP_ID, "h1", {"name": "Hike", "time": NOW}, "Walkers", NOW)
        self.assertEqual(payload.title, "Date set in Walkers!")
        self.assertEqual(payload.body, '"Hike" is happening now (Tue, Nov 14 at 22:13 UTC)')
        self.assertEqual(payload.data["type"], "poll_closed")

    def test_to_message(self):
        payload = NotificationPayload("Title", "Body", {"groupId": GROUP_ID, "count": 3})

        message = payload.to_message("device-token", "hangouts", "OPEN_HANGOUT_DETAILS")

        self.assertEqual(message.token, "device-token")
        self.assertEqual(message.notification.title, "Title")
        self.assertEqual(message.notification.body, "Body")
        self.assertEqual(
            message.data,
            {"groupId": GROUP_ID, "count": "3", "click_action": "OPEN_HANGOUT_DETAILS"},
        )
        self.assertEqual(message.android.priority, "high")
        self.assertEqual(message.android.notification.channel_id, "hangouts")
        self.assertEqual(message.apns.headers, {"apns-priority": "10"})
        self.assertEqual(message.apns.payload.aps.badge, 1)


class RecipientsTestCase(unittest.TestCase):
    """Test case for resolving device tokens."""

    def test_subscribed_members_with_tokens(self):
        store = MemoryStore(seed_data())
        self.assertCountEqual(resolve_tokens(store, GROUP_ID), [ADMIN_TOKEN, MEMBER_TOKEN])

    def test_preference_must_be_true(self):
        data = seed_data()
        data["users"][ADMIN_UID]["notificationPreferences"][GROUP_ID] = False
        del data["users"][MEMBER_UID]["notificationPreferences"]
        store = MemoryStore(data)
        self.assertEqual(resolve_tokens(store, GROUP_ID), [])

    def test_shared_tokens_are_sent_once(self):
        data = seed_data()
        data["users"][ADMIN_UID]["fcmToken"] = MEMBER_TOKEN
        store = MemoryStore(data)
        self.assertEqual(resolve_tokens(store, GROUP_ID), [MEMBER_TOKEN])

    def test_unknown_group(self):
        self.assertEqual(resolve_tokens(MemoryStore(seed_data()), "missing"), [])


class MessengerTestCase(unittest.TestCase):
    """Test case for Messenger."""

    def setUp(self):
        self.payload = NotificationPayload("Title", "Body", {"type": "new_hangout"})
        self.messenger = Messenger()

    @staticmethod
    def _response(*outcomes):
        response = MagicMock()
        response.responses = [
            MagicMock(success=ok, exception=None if ok else Exception("unregistered"))
            for ok in outcomes
        ]
        return response

    @patch("chill.notifications.sender.messaging.send_each")
    def test_send_reports_failures(self, mock_send_each):
        mock_send_each.return_value = self._response(True, False)

        report = self.messenger.send(self.payload, ["good", "stale"])

        self.assertEqual(report.sent, 1)
        self.assertEqual(report.failed, [("stale", "unregistered")])
        messages = mock_send_each.call_args[0][0]
        self.assertEqual([m.token for m in messages], ["good", "stale"])

    @patch("chill.notifications.sender.messaging.send_each")
    def test_send_in_chunks(self, mock_send_each):
        tokens = [f"token-{i}" for i in range(501)]
        mock_send_each.side_effect = [
            self._response(*([True] * 500)),
            self._response(True),
        ]

        report = self.messenger.send(self.payload, tokens)

        self.assertEqual(mock_send_each.call_count, 2)
        self.assertEqual(report.sent, 501)

    @patch("chill.notifications.sender.messaging.send_each")
    def test_send_errors_are_logged_not_raised(self, mock_send_each):
        mock_send_each.side_effect = Exception("FCM unavailable")

        with self.assertLogs("chill.notifications.sender", level="ERROR"):
            report = self.messenger.send(self.payload, ["a", "b"])

        self.assertEqual(report.sent, 0)
        self.assertEqual(len(report.failed), 2)


if __name__ == "__main__":
    unittest.main()
