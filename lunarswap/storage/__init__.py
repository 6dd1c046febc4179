"""Persistence collaborator for engine records."""

from .store import (
    PAIR_COUNT_KEY,
    InMemoryStore,
    KeyValueStore,
    StagedWrites,
    StoreView,
    Transaction,
    pair_key,
    reserve_key,
)

__all__ = [
    "InMemoryStore",
    "KeyValueStore",
    "StagedWrites",
    "StoreView",
    "Transaction",
    "PAIR_COUNT_KEY",
    "pair_key",
    "reserve_key",
]
