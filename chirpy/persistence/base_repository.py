"""
Base repository over a FlatStore collection

Module: persistence.base_repository
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Shared repository errors
  - Collection access helpers
  - Max-id + 1 assignment

ARCHITECTURE:
Repositories hold no state of their own: every call re-reads the
store, and every mutation runs inside FlatStore.transaction() so the
rest of the document survives the write.
"""

import logging
from typing import Any, Dict, List

from .json_store import FlatStore, JSONStoreError, _as_collection


class RepositoryError(JSONStoreError):
    """Base repository error"""
    pass


class RecordNotFoundError(RepositoryError):
    """Record not found"""
    pass


class RecordExistsError(RepositoryError):
    """Record already exists"""
    pass


class RecordValidationError(RepositoryError):
    """Record fails a repository rule"""
    pass


class RecordOwnershipError(RepositoryError):
    """Record belongs to someone else"""
    pass


class BaseRepository:
    """
    Common plumbing for repositories backed by one store collection.

    Subclasses set `collection` and build their own record types.
    """

    collection: str = ""

    def __init__(self, store: FlatStore):
        """
        Initialize repository

        Args:
            store: Shared flat store
        """
        self.store = store
        self.logger = logging.getLogger(f"persistence.{self.__class__.__name__}")

    def _records(self, document: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Get (creating if needed) this repository's collection in a document"""
        records = _as_collection(document, self.collection)
        document[self.collection] = records
        return records

    @staticmethod
    def _next_id(records: List[Dict[str, Any]]) -> int:
        """Next id: current maximum plus one, or 1 for an empty collection"""
        return max((record["id"] for record in records), default=0) + 1
