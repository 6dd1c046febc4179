"""Pair registry: canonical ordering, identity and existence of pairs.

Pairs are keyed by the id derived from their sorted colors, so a lookup
with the tokens in either order lands on the same record. A pair record is
created on the first successful deposit for a token combination and is
never deleted; the pair count therefore only ever grows.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from lunarswap.errors import InvalidPair, PairNotFound
from lunarswap.identity import derive_lp_color, derive_pair_id, sort_tokens
from lunarswap.log import short_id
from lunarswap.models.records import Pair
from lunarswap.models.types import to_color
from lunarswap.storage import PAIR_COUNT_KEY, KeyValueStore, StagedWrites, StoreView, pair_key
from lunarswap.storage.store import PAIR_PREFIX

logger = structlog.get_logger()


def sort_amounts(
    token_a: bytes | str,
    token_b: bytes | str,
    amount_a: int,
    amount_b: int,
) -> tuple[bytes, bytes, int, int]:
    """Sort two colors and permute their amounts in lockstep.

    Returns:
        Tuple of (token0, token1, amount0, amount1) where each amount still
        refers to the same token it was passed with
    """
    token0, token1 = sort_tokens(token_a, token_b)
    if token0 == to_color(token_a):
        return token0, token1, amount_a, amount_b
    return token0, token1, amount_b, amount_a


class PairRegistry:
    """Registry of pairs backed by the engine's key-value store.

    Read methods accept an optional ``view`` so that engines can consult
    state staged in an open operation; by default they read committed state.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def pair_id(self, token_a: bytes | str, token_b: bytes | str) -> bytes:
        """Id of the pair for two colors, in either order."""
        return derive_pair_id(*sort_tokens(token_a, token_b))

    def get(self, pair_id: bytes, view: StoreView | None = None) -> Pair | None:
        """Pair record by id, or None if the pair does not exist."""
        source = self._store if view is None else view
        return source.get(pair_key(pair_id))

    def exists(
        self, token_a: bytes | str, token_b: bytes | str, view: StoreView | None = None
    ) -> bool:
        """True if the pair has been created (active or drained)."""
        return self.get(self.pair_id(token_a, token_b), view) is not None

    def lookup(
        self, token_a: bytes | str, token_b: bytes | str, view: StoreView | None = None
    ) -> Pair:
        """Pair record for two colors, in either order.

        Raises:
            PairNotFound: If the pair has not been created
        """
        token0, token1 = sort_tokens(token_a, token_b)
        pair = self.get(derive_pair_id(token0, token1), view)
        if pair is None:
            raise PairNotFound(f"Pair does not exist: {token0.hex()[:12]}/{token1.hex()[:12]}")
        return pair

    def pair_count(self, view: StoreView | None = None) -> int:
        """Number of distinct token combinations that have ever been funded."""
        source = self._store if view is None else view
        return source.get(PAIR_COUNT_KEY) or 0

    def all_pairs(self, view: StoreView | None = None) -> list[Pair]:
        """All pair records, ordered by (token0, token1)."""
        source = self._store if view is None else view
        pairs = [record for _key, record in source.scan(PAIR_PREFIX)]
        return sorted(pairs, key=lambda pair: (pair.token0, pair.token1))

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.all_pairs())

    def new_pair(self, token0: bytes, token1: bytes) -> Pair:
        """Build (without storing) the initial record for a sorted pair."""
        pair_id = derive_pair_id(token0, token1)
        return Pair(
            pair_id=pair_id,
            token0=token0,
            token1=token1,
            lp_color=derive_lp_color(pair_id),
        )

    def register(self, operation: StagedWrites, pair: Pair) -> None:
        """Stage a newly created pair and bump the pair count.

        Args:
            operation: Open transaction or atomic operation to stage into
            pair: Record built by new_pair()

        Raises:
            InvalidPair: If a record already exists for the pair
        """
        if self.get(pair.pair_id, operation) is not None:
            raise InvalidPair(f"Pair already registered: {pair.pair_id.hex()[:12]}")
        operation.put(pair_key(pair.pair_id), pair)
        operation.increment(PAIR_COUNT_KEY)
        logger.debug(
            "pair_registered",
            pair=short_id(pair.pair_id),
            token0=short_id(pair.token0),
            token1=short_id(pair.token1),
        )

    def save(self, operation: StagedWrites, pair: Pair) -> None:
        """Stage an updated record for an existing pair."""
        operation.put(pair_key(pair.pair_id), pair)
