"""Lunarswap exchange facade.

The Lunarswap class is the caller-facing entry point. It wires the pair
registry, reserve ledger and both engines to one store, one token ledger
and one set of pair locks, and exposes read-only queries, the four
mutating entry points and the pure pricing helpers clients use to
precompute slippage bounds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from lunarswap.amm import constant_product
from lunarswap.amm.liquidity import calculate_minimum_amount
from lunarswap.config import DEFAULT_CONFIG, EngineConfig
from lunarswap.constants import DEFAULT_FEE_BPS
from lunarswap.engine import LiquidityEngine, PairLocks, SwapEngine
from lunarswap.identity import derive_pair_id as _derive_pair_id
from lunarswap.identity import derive_reserve_id as _derive_reserve_id
from lunarswap.models.records import Pair, PairState, Reserve
from lunarswap.models.types import to_color
from lunarswap.pairs import PairRegistry, ReserveLedger
from lunarswap.pairs import sort_amounts as _sort_amounts
from lunarswap.pairs import sort_tokens as _sort_tokens
from lunarswap.storage import InMemoryStore, KeyValueStore
from lunarswap.tokens import InMemoryTokenLedger, TokenAccounting

if TYPE_CHECKING:
    from lunarswap.models.results import (
        AddLiquidityResult,
        RemoveLiquidityResult,
        SwapExecution,
    )

logger = structlog.get_logger()


class Lunarswap:
    """Constant-product exchange over a registry of token pairs.

    Args:
        config: Engine settings (fee, protocol fee recipient, minimum
            liquidity lock, amount bound). Defaults to DEFAULT_CONFIG.
        store: Persistence for pair and reserve records. Defaults to a fresh
            InMemoryStore.
        tokens: Token-accounting service moving balances and LP shares.
            Defaults to a fresh InMemoryTokenLedger.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        store: KeyValueStore | None = None,
        tokens: TokenAccounting | None = None,
    ) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG
        self.store = store if store is not None else InMemoryStore()
        self.tokens = tokens if tokens is not None else InMemoryTokenLedger()
        self.registry = PairRegistry(self.store)
        self.reserves_ledger = ReserveLedger(self.store, max_amount=self.config.max_amount)
        self.locks = PairLocks()

        collaborators = (
            self.store,
            self.tokens,
            self.registry,
            self.reserves_ledger,
            self.locks,
            self.config,
        )
        self.liquidity = LiquidityEngine(*collaborators)
        self.swaps = SwapEngine(*collaborators)

    # --- Queries ---

    def pair_id(self, token_a: bytes | str, token_b: bytes | str) -> bytes:
        """Id of the pair for two colors, in either order."""
        return self.registry.pair_id(token_a, token_b)

    def reserve_id(
        self, pair_id: bytes, token_color: bytes | str, sender: object = None
    ) -> bytes:
        """Id of a pair's reserve cell for one token. ``sender`` is ignored."""
        return _derive_reserve_id(pair_id, to_color(token_color), sender)

    def exists(self, token_a: bytes | str, token_b: bytes | str) -> bool:
        """True once the pair has been funded (it stays true after draining)."""
        return self.registry.exists(token_a, token_b)

    def pair_count(self) -> int:
        """Number of distinct token combinations ever funded."""
        return self.registry.pair_count()

    def lookup(self, token_a: bytes | str, token_b: bytes | str) -> Pair:
        """Pair record for two colors, in either order.

        Raises:
            PairNotFound: If the pair does not exist
        """
        return self.registry.lookup(token_a, token_b)

    get_pair = lookup

    def reserves_of(self, pair_id: bytes) -> tuple[Reserve, Reserve]:
        """Reserve cells of a pair in canonical (token0, token1) order.

        Raises:
            PairNotFound: If the pair does not exist
        """
        return self.reserves_ledger.reserves_of(pair_id)

    def reserves(self, token_a: bytes | str, token_b: bytes | str) -> tuple[int, int]:
        """Reserve amounts of a pair in the caller's token order.

        Raises:
            PairNotFound: If the pair does not exist
        """
        pair = self.registry.lookup(token_a, token_b)
        reserve0, reserve1 = self.reserves_ledger.amounts_of(pair)
        if to_color(token_a) == pair.token0:
            return reserve0, reserve1
        return reserve1, reserve0

    def lp_total_supply(self, token_a: bytes | str, token_b: bytes | str) -> int:
        """Outstanding LP shares of a pair."""
        return self.registry.lookup(token_a, token_b).lp_total_supply

    def lp_color(self, token_a: bytes | str, token_b: bytes | str) -> bytes:
        """Color of a pair's LP shares at the token ledger."""
        return self.registry.lookup(token_a, token_b).lp_color

    def pair_state(self, token_a: bytes | str, token_b: bytes | str) -> PairState:
        """Lifecycle state of a pair: nonexistent, active or drained."""
        pair = self.registry.get(self.registry.pair_id(token_a, token_b))
        if pair is None:
            return PairState.NONEXISTENT
        reserve0, reserve1 = self.reserves_ledger.amounts_of(pair)
        if reserve0 == 0 and reserve1 == 0:
            return PairState.DRAINED
        return PairState.ACTIVE

    def all_pairs(self) -> list[Pair]:
        """Every pair record, ordered by (token0, token1)."""
        return self.registry.all_pairs()

    def get_amount_out(
        self, token_in: bytes | str, token_out: bytes | str, amount_in: int
    ) -> int:
        """Output of an exact-input swap at current reserves and the configured fee."""
        return self.swaps.get_amount_out(token_in, token_out, amount_in)

    def get_amount_in(
        self, token_in: bytes | str, token_out: bytes | str, amount_out: int
    ) -> int:
        """Input an exact-output swap needs at current reserves and the configured fee."""
        return self.swaps.get_amount_in(token_in, token_out, amount_out)

    # --- Entry points ---

    def add_liquidity(
        self,
        token_a: bytes | str,
        token_b: bytes | str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
        *,
        sender: str | None = None,
    ) -> AddLiquidityResult:
        """Deposit into a pair (creating it if needed). See LiquidityEngine.add_liquidity."""
        return self.liquidity.add_liquidity(
            token_a,
            token_b,
            amount_a_desired,
            amount_b_desired,
            amount_a_min,
            amount_b_min,
            recipient,
            sender=sender,
        )

    def remove_liquidity(
        self,
        token_a: bytes | str,
        token_b: bytes | str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
        *,
        sender: str | None = None,
    ) -> RemoveLiquidityResult:
        """Burn LP shares for reserves. See LiquidityEngine.remove_liquidity."""
        return self.liquidity.remove_liquidity(
            token_a,
            token_b,
            liquidity,
            amount_a_min,
            amount_b_min,
            recipient,
            sender=sender,
        )

    def swap_exact_in(
        self,
        token_in: bytes | str,
        token_out: bytes | str,
        amount_in: int,
        amount_out_min: int,
        recipient: str,
        *,
        sender: str | None = None,
    ) -> SwapExecution:
        """Sell an exact input amount. See SwapEngine.swap_exact_in."""
        return self.swaps.swap_exact_in(
            token_in, token_out, amount_in, amount_out_min, recipient, sender=sender
        )

    def swap_exact_out(
        self,
        token_in: bytes | str,
        token_out: bytes | str,
        amount_out: int,
        amount_in_max: int,
        recipient: str,
        *,
        sender: str | None = None,
    ) -> SwapExecution:
        """Buy an exact output amount. See SwapEngine.swap_exact_out."""
        return self.swaps.swap_exact_out(
            token_in, token_out, amount_out, amount_in_max, recipient, sender=sender
        )

    # --- Pure helpers ---

    @staticmethod
    def sort_tokens(token_a: bytes | str, token_b: bytes | str) -> tuple[bytes, bytes]:
        return _sort_tokens(token_a, token_b)

    @staticmethod
    def derive_pair_id(token_a: bytes | str, token_b: bytes | str) -> bytes:
        return _derive_pair_id(token_a, token_b)

    @staticmethod
    def sort_amounts(
        token_a: bytes | str, token_b: bytes | str, amount_a: int, amount_b: int
    ) -> tuple[bytes, bytes, int, int]:
        return _sort_amounts(token_a, token_b, amount_a, amount_b)

    @staticmethod
    def calculate_minimum_amount(optimal_amount: int, slippage_tolerance_bps: int) -> int:
        return calculate_minimum_amount(optimal_amount, slippage_tolerance_bps)

    @staticmethod
    def quote_out(
        amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS
    ) -> int:
        return constant_product.quote_out(amount_in, reserve_in, reserve_out, fee_bps)

    @staticmethod
    def quote_in(
        amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS
    ) -> int:
        return constant_product.quote_in(amount_out, reserve_in, reserve_out, fee_bps)


def create_lunarswap(
    config: EngineConfig | None = None,
    store: KeyValueStore | None = None,
    tokens: TokenAccounting | None = None,
) -> Lunarswap:
    """Build an exchange, reading settings from the environment when no config is given."""
    if config is None:
        config = EngineConfig.from_env()
    exchange = Lunarswap(config=config, store=store, tokens=tokens)
    logger.debug(
        "exchange_created",
        fee_bps=config.fee_bps,
        protocol_fee=config.fee_enabled,
        minimum_liquidity=config.minimum_liquidity,
    )
    return exchange
