"""
Persistence module - flat-file JSON storage

Provides:
- FlatStore: Single JSON document with reader/writer locking
- ChirpRepository: Chirp persistence
- UserRepository: User accounts
- RevocationStore: Revoked refresh tokens
"""

from .json_store import (
    FlatStore,
    JSONStoreError,
    JSONStoreIOError,
    JSONStoreFormatError,
    StoreEmptyError,
)
from .base_repository import (
    RepositoryError,
    RecordNotFoundError,
    RecordExistsError,
    RecordValidationError,
    RecordOwnershipError,
)
from .chirp_store import Chirp, ChirpRepository
from .user_store import User, UserRepository
from .revocation_store import RevokedToken, RevocationStore

__all__ = [
    "FlatStore",
    "JSONStoreError",
    "JSONStoreIOError",
    "JSONStoreFormatError",
    "StoreEmptyError",
    "RepositoryError",
    "RecordNotFoundError",
    "RecordExistsError",
    "RecordValidationError",
    "RecordOwnershipError",
    "Chirp",
    "ChirpRepository",
    "User",
    "UserRepository",
    "RevokedToken",
    "RevocationStore",
]
