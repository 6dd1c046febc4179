"""Swap engine: exact-input and exact-output trades against one pair.

Prices come from the constant-product AMM at the configured fee. The input
token is credited to its reserve and the output token debited from the
other, inside one atomic operation alongside the token transfers between
trader and pool custody. Each trade also advances the pair's volume and
volume-weighted price counters.
"""

from __future__ import annotations

import structlog

from lunarswap.amm import AMM, constant_product
from lunarswap.config import DEFAULT_CONFIG, EngineConfig
from lunarswap.errors import InvalidSwapInput, SlippageExceeded
from lunarswap.identity import derive_pair_id, pool_account
from lunarswap.log import short_id
from lunarswap.models.records import Pair
from lunarswap.models.results import SwapExecution
from lunarswap.models.types import to_color
from lunarswap.pairs import PairRegistry, ReserveLedger
from lunarswap.storage import KeyValueStore, StoreView
from lunarswap.tokens import TokenAccounting

from .base import EngineBase, require_account, require_non_negative, require_positive
from .context import AtomicOperation, atomic
from .locks import PairLocks

logger = structlog.get_logger()


class SwapEngine(EngineBase):
    """Executes swaps through an AMM pricing model (constant product by default)."""

    def __init__(
        self,
        store: KeyValueStore,
        tokens: TokenAccounting,
        registry: PairRegistry,
        reserves: ReserveLedger,
        locks: PairLocks,
        config: EngineConfig = DEFAULT_CONFIG,
        amm: AMM = constant_product,
    ) -> None:
        super().__init__(store, tokens, registry, reserves, locks, config)
        self.amm = amm

    def get_amount_out(
        self,
        token_in: bytes | str,
        token_out: bytes | str,
        amount_in: int,
        view: StoreView | None = None,
    ) -> int:
        """Quote the output of an exact-input swap against current reserves.

        Raises:
            PairNotFound: If the pair does not exist
            InvalidSwapInput: If amount_in is zero or the pair is drained
        """
        pair_id, color_in, color_out = _route(token_in, token_out)
        source = self.store if view is None else view
        self._require_pair(pair_id, source)
        return self.amm.quote_out(
            amount_in,
            self.reserves.balance(pair_id, color_in, source),
            self.reserves.balance(pair_id, color_out, source),
            self.config.fee_bps,
        )

    def get_amount_in(
        self,
        token_in: bytes | str,
        token_out: bytes | str,
        amount_out: int,
        view: StoreView | None = None,
    ) -> int:
        """Quote the input required by an exact-output swap against current reserves.

        Raises:
            PairNotFound: If the pair does not exist
            InvalidSwapInput: If amount_out is zero or not below the output reserve
        """
        pair_id, color_in, color_out = _route(token_in, token_out)
        source = self.store if view is None else view
        self._require_pair(pair_id, source)
        return self.amm.quote_in(
            amount_out,
            self.reserves.balance(pair_id, color_in, source),
            self.reserves.balance(pair_id, color_out, source),
            self.config.fee_bps,
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
        """Sell exactly ``amount_in`` of token_in for as much token_out as the pair gives.

        Args:
            token_in: Color being sold
            token_out: Color being bought
            amount_in: Exact amount sold
            amount_out_min: Least output the trader accepts
            recipient: Account receiving the output
            sender: Account paying the input (default: recipient)

        Raises:
            InvalidPair: If the tokens are identical
            PairNotFound: If the pair does not exist
            InvalidSwapInput: If amount_in is zero, the pair is drained or the
                output rounds down to nothing
            SlippageExceeded: If the output is below amount_out_min
            TokenAccountingError: If the sender cannot pay
        """
        require_positive("amount_in", amount_in)
        require_non_negative("amount_out_min", amount_out_min)
        require_account("recipient", recipient)
        sender = recipient if sender is None else sender
        require_account("sender", sender)
        pair_id, color_in, color_out = _route(token_in, token_out)

        with self.locks.hold(pair_id), atomic(self.store, self.tokens, "swap_exact_in") as op:
            pair = self._require_pair(pair_id, op)
            amount_out = self.amm.quote_out(
                amount_in,
                self.reserves.balance(pair_id, color_in, op),
                self.reserves.balance(pair_id, color_out, op),
                self.config.fee_bps,
            )
            if amount_out == 0:
                raise InvalidSwapInput(f"swap_exact_in: insufficient output amount for {amount_in}")
            if amount_out < amount_out_min:
                raise SlippageExceeded(
                    f"swap_exact_in: output {amount_out} below minimum {amount_out_min}"
                )
            self._settle(op, pair, color_in, color_out, amount_in, amount_out, sender, recipient)

        return self._executed(pair_id, color_in, color_out, amount_in, amount_out, "exact_in")

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
        """Buy exactly ``amount_out`` of token_out for as little token_in as the pair asks.

        Args:
            token_in: Color being sold
            token_out: Color being bought
            amount_out: Exact amount bought
            amount_in_max: Most input the trader will pay
            recipient: Account receiving the output
            sender: Account paying the input (default: recipient)

        Raises:
            InvalidPair: If the tokens are identical
            PairNotFound: If the pair does not exist
            InvalidSwapInput: If amount_out is zero or not below the output reserve
            SlippageExceeded: If the required input is above amount_in_max
            TokenAccountingError: If the sender cannot pay
        """
        require_positive("amount_out", amount_out)
        require_non_negative("amount_in_max", amount_in_max)
        require_account("recipient", recipient)
        sender = recipient if sender is None else sender
        require_account("sender", sender)
        pair_id, color_in, color_out = _route(token_in, token_out)

        with self.locks.hold(pair_id), atomic(self.store, self.tokens, "swap_exact_out") as op:
            pair = self._require_pair(pair_id, op)
            amount_in = self.amm.quote_in(
                amount_out,
                self.reserves.balance(pair_id, color_in, op),
                self.reserves.balance(pair_id, color_out, op),
                self.config.fee_bps,
            )
            if amount_in > amount_in_max:
                raise SlippageExceeded(
                    f"swap_exact_out: input {amount_in} above maximum {amount_in_max}"
                )
            self._settle(op, pair, color_in, color_out, amount_in, amount_out, sender, recipient)

        return self._executed(pair_id, color_in, color_out, amount_in, amount_out, "exact_out")

    def _settle(
        self,
        op: AtomicOperation,
        pair: Pair,
        color_in: bytes,
        color_out: bytes,
        amount_in: int,
        amount_out: int,
        sender: str,
        recipient: str,
    ) -> None:
        reserve0, reserve1 = self.reserves.amounts_of(pair, op)
        if color_in == pair.token0:
            amount0, amount1 = amount_in, amount_out
        else:
            amount0, amount1 = amount_out, amount_in
        self.reserves.credit(op, pair.pair_id, color_in, amount_in)
        self.reserves.debit(op, pair.pair_id, color_out, amount_out)
        self.registry.save(
            op,
            pair.model_copy(
                update=self._cumulative_update(pair, reserve0, reserve1, amount0, amount1)
            ),
        )
        custody = pool_account(pair.pair_id)
        op.transfer(color_in, amount_in, sender, custody)
        op.transfer(color_out, amount_out, custody, recipient)

    def _executed(
        self,
        pair_id: bytes,
        color_in: bytes,
        color_out: bytes,
        amount_in: int,
        amount_out: int,
        kind: str,
    ) -> SwapExecution:
        logger.info(
            "swap_executed",
            pair=short_id(pair_id),
            kind=kind,
            token_in=short_id(color_in),
            token_out=short_id(color_out),
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return SwapExecution(
            pair_id=pair_id,
            token_in=color_in,
            token_out=color_out,
            amount_in=amount_in,
            amount_out=amount_out,
        )


def _route(token_in: bytes | str, token_out: bytes | str) -> tuple[bytes, bytes, bytes]:
    return derive_pair_id(token_in, token_out), to_color(token_in), to_color(token_out)
