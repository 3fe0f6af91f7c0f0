from __future__ import annotations

import bisect
import logging
import os
from collections.abc import Iterable, Iterator
from contextlib import suppress
from dataclasses import dataclass
from typing import Protocol

import lmdb
import plyvel

logger = logging.getLogger(__name__)


class StoreError(OSError):
    """Raised when a store cannot be opened or read."""


@dataclass(frozen=True)
class Record:
    key: bytes
    value: bytes = b""


class Seeker(Protocol):
    """An ordered store that can start iterating at an arbitrary key."""

    def __iter__(self) -> Iterator[Record]: ...

    def seek(self, bound: bytes) -> Iterator[Record]:
        """Iterate records from the first key >= `bound`, ascending."""
        ...


class SliceStore:
    """In-memory ordered store, mostly useful for tests and small dumps.

    Records are kept sorted by key; writing an existing key replaces its value.
    """

    def __init__(self, records: Iterable[Record | tuple[bytes, bytes]] = ()) -> None:
        self._keys: list[bytes] = []
        self._values: list[bytes] = []
        for rec in records:
            if isinstance(rec, Record):
                self.put(rec.key, rec.value)
            else:
                self.put(*rec)

    def put(self, key: bytes, value: bytes = b"") -> None:
        key = bytes(key)
        i = bisect.bisect_left(self._keys, key)
        if i < len(self._keys) and self._keys[i] == key:
            self._values[i] = bytes(value)
            return
        self._keys.insert(i, key)
        self._values.insert(i, bytes(value))

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[Record]:
        return self.seek(b"")

    def seek(self, bound: bytes) -> Iterator[Record]:
        start = bisect.bisect_left(self._keys, bytes(bound))
        for i in range(start, len(self._keys)):
            yield Record(self._keys[i], self._values[i])


class LmdbStore:
    """Read-only view of an LMDB environment.

    Each iteration runs in its own read transaction, released when the
    iterator is exhausted or closed.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        if not os.path.exists(path):
            raise StoreError(f"Store not found: {path}")
        try:
            self._env = lmdb.open(path, readonly=True, lock=False, subdir=os.path.isdir(path))
        except lmdb.Error as e:
            raise StoreError(f"Cannot open store {path}: {e}") from None
        logger.info("opened LMDB store %s", path)

    def close(self) -> None:
        if getattr(self, "_env", None) is not None:
            with suppress(lmdb.Error):
                self._env.close()
            self._env = None

    def __enter__(self) -> LmdbStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[Record]:
        return self.seek(b"")

    def seek(self, bound: bytes) -> Iterator[Record]:
        if self._env is None:
            raise StoreError(f"Store is closed: {self._path}")
        try:
            with self._env.begin() as txn:
                cursor = txn.cursor()
                positioned = cursor.set_range(bound) if bound else cursor.first()
                if not positioned:
                    return
                for key, value in cursor.iternext(keys=True, values=True):
                    yield Record(bytes(key), bytes(value))
        except lmdb.Error as e:
            raise StoreError(f"Error reading store {self._path}: {e}") from None


class LevelDbStore:
    """View of a LevelDB database, opened without creating it.

    LevelDB has no read-only open mode; nothing here writes to the database.
    Each iteration uses its own iterator, closed when the iteration ends.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        if not os.path.exists(path):
            raise StoreError(f"Store not found: {path}")
        try:
            self._db = plyvel.DB(path, create_if_missing=False)
        except plyvel.Error as e:
            raise StoreError(f"Cannot open store {path}: {e}") from None
        logger.info("opened LevelDB store %s", path)

    def close(self) -> None:
        if getattr(self, "_db", None) is not None:
            with suppress(plyvel.Error):
                self._db.close()
            self._db = None

    def __enter__(self) -> LevelDbStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[Record]:
        return self.seek(b"")

    def seek(self, bound: bytes) -> Iterator[Record]:
        if self._db is None:
            raise StoreError(f"Store is closed: {self._path}")
        it = self._db.iterator(start=bytes(bound)) if bound else self._db.iterator()
        try:
            for key, value in it:
                yield Record(bytes(key), bytes(value))
        except plyvel.Error as e:
            raise StoreError(f"Error reading store {self._path}: {e}") from None
        finally:
            it.close()


STORE_TYPES = ("auto", "leveldb", "lmdb")


def detect_store_type(path: str) -> str:
    """Guess the backend from the files a store directory holds."""
    if os.path.isdir(path):
        if os.path.exists(os.path.join(path, "CURRENT")):
            return "leveldb"
        if os.path.exists(os.path.join(path, "data.mdb")):
            return "lmdb"
        raise StoreError(f"Cannot tell the store type of {path}; use --store-type")
    # A bare file can only be an LMDB environment opened without a subdirectory
    return "lmdb"


def open_store(path: str, store_type: str = "auto") -> LevelDbStore | LmdbStore:
    if store_type not in STORE_TYPES:
        raise StoreError(f"Unknown store type {store_type!r}")
    if not os.path.exists(path):
        raise StoreError(f"Store not found: {path}")
    if store_type == "auto":
        store_type = detect_store_type(path)
    if store_type == "leveldb":
        return LevelDbStore(path)
    return LmdbStore(path)


def prefix_scan(store: Seeker, prefix: bytes) -> Iterator[Record]:
    """Yield records whose key starts with `prefix`, in key order.

    Keys sharing a prefix are contiguous, so the scan seeks to the prefix and
    stops at the first key that does not match. An empty prefix yields all
    records.
    """
    records = store.seek(prefix) if prefix else iter(store)
    try:
        for rec in records:
            if not rec.key.startswith(prefix):
                break
            yield rec
    finally:
        close = getattr(records, "close", None)
        if close is not None:
            close()
