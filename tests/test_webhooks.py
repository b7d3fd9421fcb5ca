"""
Billing Webhook Tests

Module: tests.test_webhooks
Date: 2026-10-19
Version: 0.1.0
"""

import base64
import os
import shutil
import tempfile
import unittest

from chirpy.persistence import FlatStore, RecordNotFoundError, User, UserRepository
from chirpy.webhooks.billing_events import (
    EventKind,
    MalformedEventError,
    WebhookAuthError,
    WebhookDispatcher,
    WebhookEvent,
)

API_KEY = b"polka-test-key"


def api_key_header(key: bytes = API_KEY) -> str:
    return f"ApiKey {base64.b64encode(key).decode()}"


class TestWebhookEvent(unittest.TestCase):
    """Test suite for WebhookEvent parsing"""

    def test_user_upgraded(self):
        """Test the upgrade event is recognized"""
        event = WebhookEvent.from_payload(
            {"event": "user.upgraded", "data": {"user_id": 3}}
        )
        self.assertIs(event.kind, EventKind.USER_UPGRADED)
        self.assertEqual(event.user_id, 3)

    def test_unknown_event_is_unhandled(self):
        """Test other events fall back to UNHANDLED"""
        event = WebhookEvent.from_payload(
            {"event": "user.payment_failed", "data": {"user_id": 3}}
        )
        self.assertIs(event.kind, EventKind.UNHANDLED)
        self.assertEqual(event.name, "user.payment_failed")

    def test_upgrade_without_user_id(self):
        """Test upgrade event with missing data"""
        with self.assertRaises(MalformedEventError):
            WebhookEvent.from_payload({"event": "user.upgraded", "data": {}})
        with self.assertRaises(MalformedEventError):
            WebhookEvent.from_payload({"event": "user.upgraded", "data": {"user_id": "3"}})

    def test_payload_not_an_object(self):
        """Test non-object payloads"""
        with self.assertRaises(MalformedEventError):
            WebhookEvent.from_payload(["user.upgraded"])
        with self.assertRaises(MalformedEventError):
            WebhookEvent.from_payload({"data": {"user_id": 1}})


class TestWebhookDispatcher(unittest.TestCase):
    """Test suite for WebhookDispatcher"""

    def setUp(self):
        """Setup before each test"""
        self.test_dir = tempfile.mkdtemp()
        store = FlatStore(os.path.join(self.test_dir, "db.json"))
        self.users = UserRepository(store)
        self.user = self.users.create(User(email="a@example.com", password_hash="h"))
        self.dispatcher = WebhookDispatcher(self.users, API_KEY)

    def tearDown(self):
        """Cleanup after each test"""
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)

    def test_valid_api_key(self):
        """Test the configured key is accepted"""
        self.dispatcher.verify_api_key(api_key_header())

    def test_wrong_api_key(self):
        """Test a different key is refused"""
        with self.assertRaises(WebhookAuthError):
            self.dispatcher.verify_api_key(api_key_header(b"polka-wrong-key"))

    def test_prefix_of_key_refused(self):
        """Test a truncated key is refused"""
        with self.assertRaises(WebhookAuthError):
            self.dispatcher.verify_api_key(api_key_header(API_KEY[:5]))

    def test_missing_or_malformed_header(self):
        """Test missing header, wrong scheme and bad base64"""
        for header in (None, "", "Bearer abc", "ApiKey !!!not-base64!!!"):
            with self.subTest(header=header):
                with self.assertRaises(WebhookAuthError):
                    self.dispatcher.verify_api_key(header)

    def test_dispatch_upgrade(self):
        """Test upgrade event sets the flag"""
        handled = self.dispatcher.dispatch(
            WebhookEvent(kind=EventKind.USER_UPGRADED, name="user.upgraded",
                         user_id=self.user.id)
        )
        self.assertTrue(handled)
        self.assertTrue(self.users.get_by_id(self.user.id).is_chirpy_red)

    def test_dispatch_upgrade_unknown_user(self):
        """Test upgrade of a user that does not exist"""
        with self.assertRaises(RecordNotFoundError):
            self.dispatcher.dispatch(
                WebhookEvent(kind=EventKind.USER_UPGRADED, name="user.upgraded",
                             user_id=999)
            )

    def test_dispatch_unhandled(self):
        """Test unhandled events change nothing"""
        handled = self.dispatcher.dispatch(
            WebhookEvent(kind=EventKind.UNHANDLED, name="user.downgraded")
        )
        self.assertFalse(handled)
        self.assertFalse(self.users.get_by_id(self.user.id).is_chirpy_red)

    def test_handle_checks_key_first(self):
        """Test a bad key is refused before the payload is looked at"""
        with self.assertRaises(WebhookAuthError):
            self.dispatcher.handle("ApiKey bm9wZQ==", {"nonsense": True})

    def test_handle_upgrades(self):
        """Test handle verifies, parses and applies an event"""
        handled = self.dispatcher.handle(
            api_key_header(), {"event": "user.upgraded", "data": {"user_id": self.user.id}}
        )
        self.assertTrue(handled)
        self.assertTrue(self.users.get_by_id(self.user.id).is_chirpy_red)

    def test_handle_missing_payload(self):
        """Test an undecodable body is unauthorized without the key and malformed with it"""
        with self.assertRaises(WebhookAuthError):
            self.dispatcher.handle(None, None)
        with self.assertRaises(MalformedEventError):
            self.dispatcher.handle(api_key_header(), None)


if __name__ == "__main__":
    unittest.main(verbosity=2)
