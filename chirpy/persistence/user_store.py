"""
User Repository - User account persistence

Module: persistence.user_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Users stored under the "users" collection
  - Unique email per account
  - Credential update and Chirpy Red upgrade

ARCHITECTURE:
UserRepository stores already-hashed passwords; hashing lives in
security.authentication.password_hasher.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ..core.constants import COLLECTION_USERS
from .base_repository import (
    BaseRepository,
    RecordExistsError,
    RecordNotFoundError,
    RecordValidationError,
)
from .json_store import StoreEmptyError


@dataclass(frozen=True)
class User:
    """A registered account"""
    email: str
    password_hash: str
    id: int = 0
    is_chirpy_red: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""
        return {
            "id": self.id,
            "email": self.email,
            "password_hash": self.password_hash,
            "is_chirpy_red": self.is_chirpy_red,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Fields safe to return to clients"""
        return {
            "id": self.id,
            "email": self.email,
            "is_chirpy_red": self.is_chirpy_red,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary (from JSON)"""
        # Older stores keep the hash under "password"
        password_hash = data.get("password_hash", data.get("password", ""))
        return cls(
            id=data["id"],
            email=data["email"],
            password_hash=password_hash,
            is_chirpy_red=data.get("is_chirpy_red", False),
        )


class UserRepository(BaseRepository):
    """
    Manages user accounts.

    Emails are unique; ids follow the max-id + 1 rule.
    """

    collection = COLLECTION_USERS

    def create(self, user: User) -> User:
        """
        Store a new user

        Args:
            user: User to create (id and upgrade flag are assigned here)

        Returns:
            The stored User

        Raises:
            RecordExistsError: If the email is already registered
        """
        with self.store.transaction() as document:
            records = self._records(document)
            if any(record["email"] == user.email for record in records):
                raise RecordExistsError(f"User '{user.email}' already exists")

            created = replace(user, id=self._next_id(records), is_chirpy_red=False)
            records.append(created.to_dict())

        self.logger.info(f"User created: {created.id}")
        return created

    def get_by_email(self, email: str) -> User:
        """
        Get user by email

        Raises:
            RecordNotFoundError: If no user has this email
        """
        record = self._find(lambda r: r["email"] == email)
        if record is None:
            raise RecordNotFoundError(f"User '{email}' not found")
        return User.from_dict(record)

    def get_by_id(self, user_id: int) -> User:
        """
        Get user by id

        Raises:
            RecordNotFoundError: If no user has this id
        """
        record = self._find(lambda r: r["id"] == user_id)
        if record is None:
            raise RecordNotFoundError(f"User {user_id} not found")
        return User.from_dict(record)

    def update(self, user: User) -> User:
        """
        Replace email and password hash of an existing user

        The upgrade flag is kept as stored.

        Args:
            user: User carrying the id to update and the new credentials

        Returns:
            Updated User

        Raises:
            RecordValidationError: If email or password hash is empty
            RecordNotFoundError: If no user has this id
            RecordExistsError: If another user already has the email
        """
        if not user.email or not user.password_hash:
            raise RecordValidationError("Both email and password are required")

        with self.store.transaction() as document:
            records = self._records(document)
            target = None
            for record in records:
                if record["id"] == user.id:
                    target = record
                elif record["email"] == user.email:
                    raise RecordExistsError(f"User '{user.email}' already exists")
            if target is None:
                raise RecordNotFoundError(f"User {user.id} not found")

            target.pop("password", None)
            target["email"] = user.email
            target["password_hash"] = user.password_hash
            updated = User.from_dict(target)

        self.logger.info(f"User updated: {updated.id}")
        return updated

    def upgrade(self, user_id: int) -> User:
        """
        Mark a user as Chirpy Red

        Raises:
            RecordNotFoundError: If no user has this id
        """
        with self.store.transaction() as document:
            for record in self._records(document):
                if record["id"] == user_id:
                    record["is_chirpy_red"] = True
                    upgraded = User.from_dict(record)
                    break
            else:
                raise RecordNotFoundError(f"User {user_id} not found")

        self.logger.info(f"User upgraded: {user_id}")
        return upgraded

    def _find(self, predicate) -> Optional[Dict[str, Any]]:
        """Find the first raw user record matching predicate"""
        try:
            records = self.store.load_collection(self.collection)
        except StoreEmptyError:
            return None
        for record in records:
            if predicate(record):
                return record
        return None
