"""Key-value persistence for pair and reserve records.

The engine only needs ``get``/``put`` plus an all-or-nothing commit per
operation. InMemoryStore provides that with a Transaction overlay: writes
are staged on the transaction and reach the committed state in a single
step under the store lock, or not at all.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()

# Key namespaces
PAIR_PREFIX = b"pair:"
RESERVE_PREFIX = b"reserve:"
PAIR_COUNT_KEY = b"meta:pair_count"


def pair_key(pair_id: bytes) -> bytes:
    return PAIR_PREFIX + pair_id


def reserve_key(reserve_id: bytes) -> bytes:
    return RESERVE_PREFIX + reserve_id


@runtime_checkable
class StoreView(Protocol):
    """Read access shared by committed state and open transactions."""

    def get(self, key: bytes) -> Any | None:
        """Return the value stored under key, or None."""
        ...

    def scan(self, prefix: bytes) -> Iterator[tuple[bytes, Any]]:
        """Iterate over (key, value) pairs whose key starts with prefix."""
        ...


@runtime_checkable
class StagedWrites(StoreView, Protocol):
    """Write access of an open transaction."""

    def put(self, key: bytes, value: Any) -> None:
        """Stage a value under key."""
        ...

    def increment(self, key: bytes, by: int = 1) -> None:
        """Stage a counter increment resolved at commit time."""
        ...


@runtime_checkable
class KeyValueStore(StoreView, Protocol):
    """Persistence collaborator consumed by the engine."""

    def put(self, key: bytes, value: Any) -> None:
        """Write a value outside any transaction."""
        ...

    def transaction(self) -> Transaction:
        """Open a transaction staged on top of the committed state."""
        ...

    def commit(self, transaction: Transaction) -> None:
        """Apply a transaction's staged writes atomically."""
        ...


class Transaction:
    """Staged writes over a store.

    Reads see the transaction's own writes first, then committed state.
    Counter increments are kept as deltas and resolved at commit time, so
    concurrent transactions incrementing the same counter never lose updates.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._writes: dict[bytes, Any] = {}
        self._increments: dict[bytes, int] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def writes(self) -> dict[bytes, Any]:
        return dict(self._writes)

    @property
    def increments(self) -> dict[bytes, int]:
        return dict(self._increments)

    def get(self, key: bytes) -> Any | None:
        if key in self._writes:
            value = self._writes[key]
        else:
            value = self._store.get(key)
        if key in self._increments:
            value = (value or 0) + self._increments[key]
        return value

    def scan(self, prefix: bytes) -> Iterator[tuple[bytes, Any]]:
        seen: set[bytes] = set()
        for key, value in self._writes.items():
            if key.startswith(prefix):
                seen.add(key)
                yield key, value
        for key, value in self._store.scan(prefix):
            if key not in seen:
                yield key, value

    def put(self, key: bytes, value: Any) -> None:
        self._check_open()
        self._writes[key] = value

    def increment(self, key: bytes, by: int = 1) -> None:
        self._check_open()
        self._increments[key] = self._increments.get(key, 0) + by

    def commit(self) -> None:
        self._check_open()
        self._store.commit(self)
        self._closed = True

    def rollback(self) -> None:
        """Discard staged writes. Committed state was never touched."""
        self._writes.clear()
        self._increments.clear()
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Transaction already closed")


class InMemoryStore:
    """Dictionary-backed KeyValueStore."""

    def __init__(self) -> None:
        self._data: dict[bytes, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: bytes) -> Any | None:
        return self._data.get(key)

    def scan(self, prefix: bytes) -> Iterator[tuple[bytes, Any]]:
        with self._lock:
            items = [(k, v) for k, v in self._data.items() if k.startswith(prefix)]
        yield from items

    def put(self, key: bytes, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def transaction(self) -> Transaction:
        return Transaction(self)

    def commit(self, transaction: Transaction) -> None:
        writes = transaction.writes
        increments = transaction.increments
        with self._lock:
            self._data.update(writes)
            for key, delta in increments.items():
                self._data[key] = self._data.get(key, 0) + delta
        logger.debug("store_committed", writes=len(writes), increments=len(increments))

    def __len__(self) -> int:
        return len(self._data)
