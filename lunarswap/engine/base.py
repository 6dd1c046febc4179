"""Shared plumbing for the liquidity and swap engines."""

from __future__ import annotations

from lunarswap.amm.liquidity import accumulate_volume
from lunarswap.config import DEFAULT_CONFIG, EngineConfig
from lunarswap.errors import InvalidInput, PairNotFound
from lunarswap.models.records import Pair
from lunarswap.pairs import PairRegistry, ReserveLedger
from lunarswap.storage import KeyValueStore, StoreView
from lunarswap.tokens import TokenAccounting

from .locks import PairLocks


class EngineBase:
    """Collaborators every mutating engine works against.

    Engines built for the same exchange must share the store, token ledger,
    registry, reserve ledger and locks so that their operations on a pair
    serialize with each other.
    """

    def __init__(
        self,
        store: KeyValueStore,
        tokens: TokenAccounting,
        registry: PairRegistry,
        reserves: ReserveLedger,
        locks: PairLocks,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.registry = registry
        self.reserves = reserves
        self.locks = locks
        self.config = config

    def _require_pair(self, pair_id: bytes, view: StoreView) -> Pair:
        pair = self.registry.get(pair_id, view)
        if pair is None:
            raise PairNotFound(f"Pair does not exist: {pair_id.hex()[:12]}")
        return pair

    @staticmethod
    def _cumulative_update(
        pair: Pair, reserve0: int, reserve1: int, amount0: int, amount1: int
    ) -> dict[str, int]:
        """Counter fields for ``model_copy`` after amounts moved against the given reserves."""
        price0_vol, price1_vol, volume0, volume1 = accumulate_volume(
            pair.cumulatives, reserve0, reserve1, amount0, amount1
        )
        return {
            "price0_vol_cumulative": price0_vol,
            "price1_vol_cumulative": price1_vol,
            "volume0_cumulative": volume0,
            "volume1_cumulative": volume1,
        }


def require_positive(name: str, value: int) -> None:
    """Raise InvalidInput unless value is a positive int."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an int, got {type(value).__name__}")
    if value <= 0:
        raise InvalidInput(f"{name} must be positive, got {value}")


def require_non_negative(name: str, value: int) -> None:
    """Raise InvalidInput unless value is a non-negative int."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise InvalidInput(f"{name} cannot be negative, got {value}")


def require_account(name: str, value: str) -> None:
    """Raise InvalidInput unless value is a non-empty account identifier."""
    if not isinstance(value, str) or not value:
        raise InvalidInput(f"{name} must be a non-empty account identifier")
