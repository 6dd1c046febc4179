"""Pair and reserve management.

Provides PairRegistry for pair identity/existence and ReserveLedger for the
per-token balances each pair holds.
"""

from .registry import PairRegistry, sort_amounts, sort_tokens
from .reserves import ReserveLedger

__all__ = [
    "PairRegistry",
    "ReserveLedger",
    "sort_amounts",
    "sort_tokens",
]
