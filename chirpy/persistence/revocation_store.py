"""
Revocation Store - Revoked refresh tokens

Module: persistence.revocation_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Revoked tokens stored under the "tokens" collection
  - Append-only revocation list
  - Membership check

ARCHITECTURE:
Only refresh tokens are revoked. Access tokens expire on their own
within the hour and are never looked up here.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from ..core.constants import COLLECTION_TOKENS
from .base_repository import BaseRepository
from .json_store import FlatStore, StoreEmptyError


@dataclass(frozen=True)
class RevokedToken:
    """A refresh token that must no longer be honored"""
    id: str
    revoked_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""
        return {
            "id": self.id,
            "revoked_at": self.revoked_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RevokedToken":
        """Create from dictionary (from JSON)"""
        return cls(
            id=data["id"],
            revoked_at=datetime.fromisoformat(data["revoked_at"]),
        )


class RevocationStore(BaseRepository):
    """
    Append-only list of revoked refresh tokens.
    """

    collection = COLLECTION_TOKENS

    def __init__(
        self,
        store: FlatStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize revocation store

        Args:
            store: Shared flat store
            clock: Source of the revocation timestamp
        """
        super().__init__(store)
        self._clock = clock

    def revoke(self, token: str) -> RevokedToken:
        """
        Record a token as revoked

        Args:
            token: Raw token string

        Returns:
            The stored RevokedToken

        Raises:
            JSONStoreIOError: If the store cannot be written
        """
        revoked = RevokedToken(id=token, revoked_at=self._clock())
        with self.store.transaction() as document:
            self._records(document).append(revoked.to_dict())

        self.logger.info(f"Token revoked at {revoked.revoked_at.isoformat()}")
        return revoked

    def is_revoked(self, token: str) -> bool:
        """Check whether a token is on the revocation list"""
        try:
            records = self.store.load_collection(self.collection)
        except StoreEmptyError:
            return False
        return any(record["id"] == token for record in records)

    def list_revoked(self) -> List[RevokedToken]:
        """List all revocation records"""
        try:
            records = self.store.load_collection(self.collection)
        except StoreEmptyError:
            return []
        return [RevokedToken.from_dict(r) for r in records]
