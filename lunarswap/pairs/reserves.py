"""Reserve ledger: per-pair, per-token balances.

Each reserve cell is stored under an id derived from (pair_id, token_color)
only. Cells are mutated exclusively through credit() and debit(), which
stage their writes in an open operation; a failing debit aborts that whole
operation.
"""

from __future__ import annotations

from lunarswap.constants import MAX_AMOUNT
from lunarswap.errors import InsufficientReserve, InvalidInput, PairNotFound
from lunarswap.identity import derive_reserve_id
from lunarswap.models.records import Pair, Reserve
from lunarswap.safe_int import ArithmeticOverflow, S
from lunarswap.storage import KeyValueStore, StagedWrites, StoreView, pair_key, reserve_key


class ReserveLedger:
    """Reserve cells for every pair, backed by the engine's key-value store.

    Args:
        store: Committed state to read from when no view is given
        max_amount: Upper bound on a single reserve (default: 2^128-1)
    """

    def __init__(self, store: KeyValueStore, max_amount: int = MAX_AMOUNT) -> None:
        self._store = store
        self.max_amount = max_amount

    @staticmethod
    def derive_reserve_id(pair_id: bytes, token_color: bytes, sender: object = None) -> bytes:
        """Reserve id for a pair and token. ``sender`` does not affect the result."""
        return derive_reserve_id(pair_id, token_color, sender)

    def get(
        self, pair_id: bytes, token_color: bytes, view: StoreView | None = None
    ) -> Reserve:
        """Reserve cell for one token of a pair (zero if never credited)."""
        source = self._store if view is None else view
        reserve_id = derive_reserve_id(pair_id, token_color)
        reserve = source.get(reserve_key(reserve_id))
        if reserve is None:
            return Reserve(reserve_id=reserve_id, pair_id=pair_id, token_color=token_color)
        return reserve

    def balance(self, pair_id: bytes, token_color: bytes, view: StoreView | None = None) -> int:
        """Amount held in one reserve cell."""
        return self.get(pair_id, token_color, view).amount

    def reserves_of(
        self, pair_id: bytes, view: StoreView | None = None
    ) -> tuple[Reserve, Reserve]:
        """Both reserve cells of a pair, in canonical (token0, token1) order.

        Raises:
            PairNotFound: If no pair exists with this id
        """
        source = self._store if view is None else view
        pair: Pair | None = source.get(pair_key(pair_id))
        if pair is None:
            raise PairNotFound(f"Pair does not exist: {pair_id.hex()[:12]}")
        return self.get(pair_id, pair.token0, source), self.get(pair_id, pair.token1, source)

    def amounts_of(self, pair: Pair, view: StoreView | None = None) -> tuple[int, int]:
        """Reserve amounts (reserve0, reserve1) of a pair record."""
        return (
            self.balance(pair.pair_id, pair.token0, view),
            self.balance(pair.pair_id, pair.token1, view),
        )

    def credit(
        self, operation: StagedWrites, pair_id: bytes, token_color: bytes, delta: int
    ) -> Reserve:
        """Stage an increase of a reserve.

        Raises:
            InvalidInput: If delta is negative
            ArithmeticOverflow: If the new balance exceeds max_amount
        """
        if delta < 0:
            raise InvalidInput(f"Credit amount cannot be negative: {delta}")
        current = self.get(pair_id, token_color, operation)
        updated = S(current.amount) + S(delta)
        if not updated.fits(self.max_amount):
            raise ArithmeticOverflow(
                f"Reserve overflow: {current.amount} + {delta} exceeds {self.max_amount}"
            )
        return self._stage(operation, current, updated.value)

    def debit(
        self, operation: StagedWrites, pair_id: bytes, token_color: bytes, delta: int
    ) -> Reserve:
        """Stage a decrease of a reserve.

        Raises:
            InvalidInput: If delta is negative
            InsufficientReserve: If delta exceeds the current balance
        """
        if delta < 0:
            raise InvalidInput(f"Debit amount cannot be negative: {delta}")
        current = self.get(pair_id, token_color, operation)
        if delta > current.amount:
            raise InsufficientReserve(
                f"Insufficient reserve for {token_color.hex()[:12]}: "
                f"{current.amount} < {delta}"
            )
        return self._stage(operation, current, (S(current.amount) - S(delta)).value)

    @staticmethod
    def _stage(operation: StagedWrites, current: Reserve, amount: int) -> Reserve:
        updated = current.model_copy(update={"amount": amount})
        operation.put(reserve_key(current.reserve_id), updated)
        return updated
