"""
Chirp Repository - Chirp persistence

Module: persistence.chirp_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Chirps stored under the "chirps" collection
  - Create, get, list, delete
  - Author check on delete within the same transaction
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.constants import COLLECTION_CHIRPS
from .base_repository import (
    BaseRepository,
    RecordNotFoundError,
    RecordOwnershipError,
)
from .json_store import StoreEmptyError


@dataclass(frozen=True)
class Chirp:
    """A short user-authored post"""
    id: int
    author_id: int
    body: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""
        return {
            "id": self.id,
            "author_id": self.author_id,
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chirp":
        """Create from dictionary (from JSON)"""
        return cls(
            id=data["id"],
            author_id=data.get("author_id", 0),
            body=data["body"],
        )


class ChirpRepository(BaseRepository):
    """
    Manages chirp persistence.

    The body is stored as given; length and masking rules are applied
    by the caller (see core.content_policy).
    """

    collection = COLLECTION_CHIRPS

    def create(self, body: str, author_id: int) -> Chirp:
        """
        Store a new chirp

        Args:
            body: Validated chirp text
            author_id: Id of the authoring user

        Returns:
            The stored Chirp

        Raises:
            JSONStoreIOError: If the store cannot be written
        """
        with self.store.transaction() as document:
            records = self._records(document)
            chirp = Chirp(id=self._next_id(records), author_id=author_id, body=body)
            records.append(chirp.to_dict())

        self.logger.info(f"Chirp created: {chirp.id} by user {author_id}")
        return chirp

    def get(self, chirp_id: int) -> Chirp:
        """
        Get a chirp by id

        Raises:
            StoreEmptyError: If no chirps were ever stored
            RecordNotFoundError: If no chirp has this id
        """
        for record in self.store.load_collection(self.collection):
            if record["id"] == chirp_id:
                return Chirp.from_dict(record)
        raise RecordNotFoundError(f"Chirp {chirp_id} not found")

    def list(self) -> List[Chirp]:
        """
        List all chirps in insertion order

        Raises:
            StoreEmptyError: If there are no chirps
        """
        chirps = [Chirp.from_dict(r) for r in self.store.load_collection(self.collection)]
        if not chirps:
            raise StoreEmptyError("No chirps stored")
        return chirps

    def delete(self, chirp_id: int, author_id: Optional[int] = None) -> None:
        """
        Delete a chirp

        Args:
            chirp_id: Chirp to delete
            author_id: When given, only this author may delete the chirp

        Raises:
            RecordNotFoundError: If no chirp has this id
            RecordOwnershipError: If author_id does not own the chirp
        """
        with self.store.transaction() as document:
            records = self._records(document)
            for i, record in enumerate(records):
                if record["id"] != chirp_id:
                    continue
                if author_id is not None and record.get("author_id") != author_id:
                    raise RecordOwnershipError(
                        f"User {author_id} may not delete chirp {chirp_id}"
                    )
                records.pop(i)
                break
            else:
                raise RecordNotFoundError(f"Chirp {chirp_id} not found")

        self.logger.info(f"Chirp deleted: {chirp_id}")
