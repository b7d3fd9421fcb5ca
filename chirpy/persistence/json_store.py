"""
Flat Store - Single-document JSON persistence

Module: persistence.json_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - One JSON document holding every collection
  - Reader/writer lock around all file access
  - Atomic writes (write to temp file, then move)
  - Read-merge-write transactions for mutations

ARCHITECTURE:
FlatStore provides:
  - Raw and parsed reads under a shared lock
  - Full-document writes under an exclusive lock
  - transaction(): load, mutate, write back as one locked step
  - An empty file is the "no data yet" state, not an error

Every mutation must go through transaction(); writing a partial
document with write() replaces the whole file and drops any
collection it does not contain.
"""

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List


class JSONStoreError(Exception):
    """Base JSON store error"""
    pass


class JSONStoreIOError(JSONStoreError):
    """File I/O or serialization error"""
    pass


class JSONStoreFormatError(JSONStoreError):
    """JSON format error"""
    pass


class StoreEmptyError(JSONStoreError):
    """Store (or requested collection) holds no data yet"""
    pass


class ReadWriteLock:
    """
    Many readers or one writer.

    Writers wait for active readers to drain; new readers wait while a
    writer holds or is waiting for the lock.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class FlatStore:
    """
    Single-file JSON store shared by all repositories.

    Handles:
    - File creation and permissions
    - Atomic writes (temp file + rename)
    - Thread-safe read/write operations
    - Automatic directory creation
    """

    def __init__(self, file_path: str):
        """
        Initialize flat store

        Args:
            file_path: Path to JSON file (must end in .json)

        Raises:
            ValueError: If the path is not a .json file
            JSONStoreIOError: If the file cannot be created
        """
        self.logger = logging.getLogger(f"persistence.{self.__class__.__name__}")
        self.file_path = Path(file_path)
        if self.file_path.suffix != ".json":
            raise ValueError(f"got an invalid format for database file: {file_path}")

        self._lock = ReadWriteLock()

        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            if not self.file_path.exists():
                self.file_path.touch(mode=0o600)
                self.logger.info(f"Created new store: {self.file_path}")
        except OSError as e:
            raise JSONStoreIOError(f"Failed to create {self.file_path}: {e}")

    def read(self) -> bytes:
        """
        Read raw file contents

        Returns:
            File bytes (empty when nothing was written yet)

        Raises:
            JSONStoreIOError: If file cannot be read
        """
        with self._lock.read_locked():
            return self._read_bytes()

    def load(self) -> Dict[str, Any]:
        """
        Load the full document

        Returns:
            Parsed document ({} for an empty store)

        Raises:
            JSONStoreIOError: If file cannot be read
            JSONStoreFormatError: If JSON is invalid
        """
        with self._lock.read_locked():
            return self._load_unlocked()

    def load_collection(self, name: str) -> List[Dict[str, Any]]:
        """
        Load a single collection

        Args:
            name: Collection key ("chirps", "users", "tokens")

        Returns:
            List of raw entity dicts

        Raises:
            StoreEmptyError: If the store or collection was never written
            JSONStoreIOError: If file cannot be read
            JSONStoreFormatError: If JSON is invalid
        """
        document = self.load()
        if name not in document:
            raise StoreEmptyError(f"No '{name}' stored yet")
        return _as_collection(document, name)

    def write(self, document: Dict[str, Any]) -> None:
        """
        Replace the whole document (atomic write)

        Args:
            document: Mapping of collection name to entity list

        Raises:
            JSONStoreIOError: If write fails
        """
        with self._lock.write_locked():
            self._write_atomic(document)

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """
        Read-merge-write under the exclusive lock

        Yields the full current document; changes made to it are written
        back when the block exits normally. An exception inside the block
        leaves the file untouched.

        Raises:
            JSONStoreIOError: If read or write fails
            JSONStoreFormatError: If the stored JSON is invalid
        """
        with self._lock.write_locked():
            document = self._load_unlocked()
            yield document
            self._write_atomic(document)

    def clear(self) -> None:
        """
        Truncate the store to empty

        Raises:
            JSONStoreIOError: If the file cannot be truncated
        """
        with self._lock.write_locked():
            try:
                with open(self.file_path, "wb"):
                    pass
            except OSError as e:
                raise JSONStoreIOError(f"Failed to clear {self.file_path}: {e}")
        self.logger.info(f"Store cleared: {self.file_path}")

    def _read_bytes(self) -> bytes:
        try:
            return self.file_path.read_bytes()
        except FileNotFoundError:
            self.logger.warning("File not found, treating store as empty")
            return b""
        except OSError as e:
            raise JSONStoreIOError(f"Failed to read {self.file_path}: {e}")

    def _load_unlocked(self) -> Dict[str, Any]:
        raw = self._read_bytes()
        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise JSONStoreFormatError(f"Invalid JSON in {self.file_path}: {e}")
        if not isinstance(document, dict):
            raise JSONStoreFormatError(
                f"Expected a JSON object in {self.file_path}, "
                f"got {type(document).__name__}"
            )
        return document

    def _write_atomic(self, document: Dict[str, Any]) -> None:
        """
        Atomic write: write to temp file, then rename

        Args:
            document: Data to write

        Raises:
            JSONStoreIOError: If serialization or write fails
        """
        try:
            payload = json.dumps(document, indent=2)
        except (TypeError, ValueError) as e:
            raise JSONStoreIOError(f"Failed to serialize document: {e}")

        temp_path = self.file_path.with_suffix(".tmp")
        try:
            temp_path.write_text(payload, encoding="utf-8")
            temp_path.replace(self.file_path)

            # rw-------
            self.file_path.chmod(0o600)
        except OSError as e:
            raise JSONStoreIOError(f"Failed to write {self.file_path}: {e}")


def _as_collection(document: Dict[str, Any], name: str) -> List[Dict[str, Any]]:
    collection = document.get(name)
    if collection is None:
        return []
    if not isinstance(collection, list):
        raise JSONStoreFormatError(f"Collection '{name}' is not a list")
    return collection
