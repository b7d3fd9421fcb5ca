"""
Repository Tests

Module: tests.test_repositories
Date: 2026-10-19
Version: 0.1.0

Covers ChirpRepository, UserRepository and RevocationStore over a
shared FlatStore.
"""

import json
import os
import shutil
import tempfile
import unittest
from datetime import datetime, timezone

from chirpy.persistence import (
    ChirpRepository,
    FlatStore,
    RecordExistsError,
    RecordNotFoundError,
    RecordOwnershipError,
    RecordValidationError,
    RevocationStore,
    StoreEmptyError,
    User,
    UserRepository,
)


class StoreTestCase(unittest.TestCase):
    """Base fixture: one temporary store per test"""

    def setUp(self):
        """Setup before each test"""
        self.test_dir = tempfile.mkdtemp()
        self.store = FlatStore(os.path.join(self.test_dir, "db.json"))

    def tearDown(self):
        """Cleanup after each test"""
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)


class TestChirpRepository(StoreTestCase):
    """Test suite for ChirpRepository"""

    def setUp(self):
        super().setUp()
        self.chirps = ChirpRepository(self.store)

    def test_first_chirp_gets_id_one(self):
        """Test creating on an empty store starts at 1"""
        chirp = self.chirps.create("hello world", author_id=1)
        self.assertEqual(chirp.id, 1)
        self.assertEqual(chirp.author_id, 1)
        self.assertEqual(chirp.body, "hello world")

    def test_ids_strictly_increasing(self):
        """Test successive creates yield 1, 2, 3, ..."""
        ids = [self.chirps.create(f"chirp {i}", author_id=1).id for i in range(5)]
        self.assertEqual(ids, [1, 2, 3, 4, 5])

    def test_id_follows_max_after_delete(self):
        """Test next id is max + 1, not count + 1"""
        self.chirps.create("a", author_id=1)
        self.chirps.create("b", author_id=1)
        self.chirps.create("c", author_id=1)
        self.chirps.delete(2)

        self.assertEqual(self.chirps.create("d", author_id=1).id, 4)

    def test_get(self):
        """Test fetching a chirp by id"""
        self.chirps.create("first", author_id=1)
        created = self.chirps.create("second", author_id=2)

        self.assertEqual(self.chirps.get(2), created)

    def test_get_missing(self):
        """Test fetching an unknown id"""
        self.chirps.create("first", author_id=1)
        with self.assertRaises(RecordNotFoundError):
            self.chirps.get(99)

    def test_get_on_empty_store(self):
        """Test fetching from a store with no chirps yet"""
        with self.assertRaises(StoreEmptyError):
            self.chirps.get(1)

    def test_list_in_insertion_order(self):
        """Test listing returns every chirp in order"""
        for body in ("one", "two", "three"):
            self.chirps.create(body, author_id=1)

        self.assertEqual([c.body for c in self.chirps.list()], ["one", "two", "three"])

    def test_list_empty(self):
        """Test listing an empty store"""
        with self.assertRaises(StoreEmptyError):
            self.chirps.list()

    def test_delete_then_get_not_found(self):
        """Test a deleted chirp can no longer be fetched"""
        self.chirps.create("keep", author_id=1)
        self.chirps.create("drop", author_id=1)

        self.chirps.delete(2)

        with self.assertRaises(RecordNotFoundError):
            self.chirps.get(2)
        self.assertEqual(len(self.chirps.list()), 1)

    def test_delete_last_chirp_then_get_not_found(self):
        """Test deleting the only chirp leaves a not-found, not empty, store"""
        self.chirps.create("only", author_id=1)
        self.chirps.delete(1)

        with self.assertRaises(RecordNotFoundError):
            self.chirps.get(1)

    def test_delete_missing(self):
        """Test deleting an unknown id"""
        self.chirps.create("first", author_id=1)
        with self.assertRaises(RecordNotFoundError):
            self.chirps.delete(42)

    def test_delete_by_author(self):
        """Test the author may delete their chirp"""
        self.chirps.create("mine", author_id=7)
        self.chirps.delete(1, author_id=7)

        with self.assertRaises(StoreEmptyError):
            self.chirps.list()

    def test_delete_by_other_user(self):
        """Test another user cannot delete the chirp"""
        self.chirps.create("mine", author_id=7)

        with self.assertRaises(RecordOwnershipError):
            self.chirps.delete(1, author_id=8)
        self.assertEqual(self.chirps.get(1).author_id, 7)

    def test_chirps_do_not_clobber_users(self):
        """Test creating chirps keeps the users collection"""
        users = UserRepository(self.store)
        users.create(User(email="a@example.com", password_hash="hash"))

        self.chirps.create("hello", author_id=1)

        self.assertEqual(users.get_by_id(1).email, "a@example.com")


class TestUserRepository(StoreTestCase):
    """Test suite for UserRepository"""

    def setUp(self):
        super().setUp()
        self.users = UserRepository(self.store)

    def test_create_first_user(self):
        """Test first user gets id 1 and is not upgraded"""
        user = self.users.create(User(email="a@example.com", password_hash="h1"))
        self.assertEqual(user.id, 1)
        self.assertFalse(user.is_chirpy_red)

    def test_create_assigns_max_plus_one(self):
        """Test ids follow the current maximum"""
        self.users.create(User(email="a@example.com", password_hash="h"))
        second = self.users.create(User(email="b@example.com", password_hash="h"))
        self.assertEqual(second.id, 2)

    def test_create_ignores_given_upgrade_flag(self):
        """Test new users always start without Chirpy Red"""
        user = self.users.create(
            User(email="a@example.com", password_hash="h", is_chirpy_red=True)
        )
        self.assertFalse(user.is_chirpy_red)

    def test_create_duplicate_email(self):
        """Test a second account with the same email is rejected"""
        self.users.create(User(email="a@example.com", password_hash="h"))
        with self.assertRaises(RecordExistsError):
            self.users.create(User(email="a@example.com", password_hash="other"))

    def test_get_by_email_and_id(self):
        """Test both lookups return the stored user"""
        created = self.users.create(User(email="a@example.com", password_hash="h"))

        self.assertEqual(self.users.get_by_email("a@example.com"), created)
        self.assertEqual(self.users.get_by_id(created.id), created)

    def test_get_missing(self):
        """Test lookups for unknown users"""
        with self.assertRaises(RecordNotFoundError):
            self.users.get_by_email("nobody@example.com")
        with self.assertRaises(RecordNotFoundError):
            self.users.get_by_id(1)

    def test_update(self):
        """Test credentials are replaced and upgrade flag kept"""
        created = self.users.create(User(email="a@example.com", password_hash="old"))
        self.users.upgrade(created.id)

        updated = self.users.update(
            User(id=created.id, email="new@example.com", password_hash="new")
        )

        self.assertEqual(updated.email, "new@example.com")
        self.assertEqual(updated.password_hash, "new")
        self.assertTrue(updated.is_chirpy_red)
        with self.assertRaises(RecordNotFoundError):
            self.users.get_by_email("a@example.com")

    def test_update_requires_both_fields(self):
        """Test partial updates are rejected"""
        created = self.users.create(User(email="a@example.com", password_hash="h"))

        with self.assertRaises(RecordValidationError):
            self.users.update(User(id=created.id, email="", password_hash="h"))
        with self.assertRaises(RecordValidationError):
            self.users.update(User(id=created.id, email="b@example.com", password_hash=""))

    def test_update_missing(self):
        """Test updating an unknown id"""
        with self.assertRaises(RecordNotFoundError):
            self.users.update(User(id=5, email="a@example.com", password_hash="h"))

    def test_update_to_taken_email(self):
        """Test moving to another user's email is rejected"""
        self.users.create(User(email="a@example.com", password_hash="h"))
        second = self.users.create(User(email="b@example.com", password_hash="h"))

        with self.assertRaises(RecordExistsError):
            self.users.update(
                User(id=second.id, email="a@example.com", password_hash="h")
            )

    def test_upgrade(self):
        """Test upgrade sets the flag"""
        created = self.users.create(User(email="a@example.com", password_hash="h"))
        upgraded = self.users.upgrade(created.id)

        self.assertTrue(upgraded.is_chirpy_red)
        self.assertTrue(self.users.get_by_id(created.id).is_chirpy_red)

    def test_upgrade_missing(self):
        """Test upgrading an unknown user"""
        with self.assertRaises(RecordNotFoundError):
            self.users.upgrade(3)

    def test_reads_legacy_password_field(self):
        """Test records storing the hash under "password" still load"""
        self.store.write({
            "users": [{"id": 4, "email": "old@example.com", "password": "legacy"}]
        })

        user = self.users.get_by_id(4)
        self.assertEqual(user.password_hash, "legacy")
        self.assertFalse(user.is_chirpy_red)

    def test_password_hash_persisted_not_exposed(self):
        """Test public dict omits the hash"""
        user = self.users.create(User(email="a@example.com", password_hash="secret"))

        self.assertNotIn("password_hash", user.to_public_dict())
        stored = json.loads(self.store.read())
        self.assertEqual(stored["users"][0]["password_hash"], "secret")


class TestRevocationStore(StoreTestCase):
    """Test suite for RevocationStore"""

    def setUp(self):
        super().setUp()
        self.fixed_now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        self.revocations = RevocationStore(self.store, clock=lambda: self.fixed_now)

    def test_empty_store_is_not_revoked(self):
        """Test nothing is revoked in a fresh store"""
        self.assertFalse(self.revocations.is_revoked("token"))
        self.assertEqual(self.revocations.list_revoked(), [])

    def test_revoke(self):
        """Test revoking records the token and time"""
        revoked = self.revocations.revoke("token-a")

        self.assertEqual(revoked.id, "token-a")
        self.assertEqual(revoked.revoked_at, self.fixed_now)
        self.assertTrue(self.revocations.is_revoked("token-a"))
        self.assertFalse(self.revocations.is_revoked("token-b"))

    def test_revocations_round_trip(self):
        """Test revocation records load back intact"""
        self.revocations.revoke("token-a")
        self.revocations.revoke("token-b")

        records = self.revocations.list_revoked()
        self.assertEqual([r.id for r in records], ["token-a", "token-b"])
        self.assertEqual(records[0].revoked_at, self.fixed_now)

    def test_revoke_keeps_other_collections(self):
        """Test revocation does not drop chirps or users"""
        ChirpRepository(self.store).create("hello", author_id=1)
        UserRepository(self.store).create(User(email="a@example.com", password_hash="h"))

        self.revocations.revoke("token-a")

        document = self.store.load()
        self.assertEqual(len(document["chirps"]), 1)
        self.assertEqual(len(document["users"]), 1)
        self.assertEqual(len(document["tokens"]), 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
