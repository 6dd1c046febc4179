"""Liquidity engine: deposits and withdrawals against pair reserves.

Deposits into an empty pair fix its price from the depositor's own ratio and
mint the geometric mean of the two amounts as shares. Later deposits are
trimmed to the current price and mint shares pro rata to the smaller
contribution. Withdrawals burn shares for a pro-rata cut of both reserves.

When a protocol fee recipient is configured, each deposit or withdrawal
first mints the protocol's share of fee growth since the previous one
(tracked through the pair's kLast).
"""

from __future__ import annotations

import structlog

from lunarswap.amm.liquidity import protocol_fee_liquidity, quote_deposit, withdrawal_amounts
from lunarswap.constants import DEAD_ACCOUNT
from lunarswap.errors import InsufficientLiquidity, SlippageExceeded
from lunarswap.identity import derive_pair_id, pool_account
from lunarswap.log import short_id
from lunarswap.models.records import Pair
from lunarswap.models.results import AddLiquidityResult, RemoveLiquidityResult
from lunarswap.models.types import to_color
from lunarswap.pairs import sort_amounts
from lunarswap.safe_int import S

from .base import EngineBase, require_account, require_non_negative, require_positive
from .context import AtomicOperation, atomic

logger = structlog.get_logger()


class LiquidityEngine(EngineBase):
    """Mints and burns liquidity shares against the reserve ledger."""

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
        """Deposit two tokens into their pair, creating the pair if needed.

        Args:
            token_a: Color of the first token (any order)
            token_b: Color of the second token
            amount_a_desired: Most of token A the caller will deposit
            amount_b_desired: Most of token B the caller will deposit
            amount_a_min: Least of token A the deposit may use
            amount_b_min: Least of token B the deposit may use
            recipient: Account credited with the minted shares
            sender: Account the tokens are taken from (default: recipient)

        Returns:
            AddLiquidityResult with amounts taken and shares minted

        Raises:
            InvalidInput: If an amount is not positive / non-negative as required
            InvalidPair: If the tokens are identical
            SlippageExceeded: If the price-matched deposit is below a minimum
            InsufficientLiquidity: If the deposit would mint no shares
            ArithmeticOverflow: If a reserve would exceed the amount bound
            TokenAccountingError: If the sender cannot fund the deposit
        """
        require_positive("amount_a_desired", amount_a_desired)
        require_positive("amount_b_desired", amount_b_desired)
        require_non_negative("amount_a_min", amount_a_min)
        require_non_negative("amount_b_min", amount_b_min)
        require_account("recipient", recipient)
        sender = recipient if sender is None else sender
        require_account("sender", sender)

        token0, token1, amount0_desired, amount1_desired = sort_amounts(
            token_a, token_b, amount_a_desired, amount_b_desired
        )
        _, _, amount0_min, amount1_min = sort_amounts(token_a, token_b, amount_a_min, amount_b_min)
        pair_id = derive_pair_id(token0, token1)

        with self.locks.hold(pair_id), atomic(self.store, self.tokens, "add_liquidity") as op:
            existing = self.registry.get(pair_id, op)
            pair = existing if existing is not None else self.registry.new_pair(token0, token1)
            reserve0, reserve1 = self.reserves.amounts_of(pair, op)
            pair = self._mint_protocol_fee(op, pair, reserve0, reserve1)

            quote = quote_deposit(
                amount0_desired, amount1_desired, reserve0, reserve1, pair.lp_total_supply
            )
            if quote.amount0 < amount0_min or quote.amount1 < amount1_min:
                raise SlippageExceeded(
                    f"add_liquidity: deposit ({quote.amount0}, {quote.amount1}) "
                    f"below minimum ({amount0_min}, {amount1_min})"
                )

            locked = 0
            if reserve0 == 0 and reserve1 == 0:
                locked = self.config.minimum_liquidity
            if quote.liquidity <= locked:
                raise InsufficientLiquidity(
                    f"add_liquidity: insufficient liquidity minted ({quote.liquidity})"
                )

            new0 = self.reserves.credit(op, pair_id, token0, quote.amount0)
            new1 = self.reserves.credit(op, pair_id, token1, quote.amount1)
            pair = pair.model_copy(
                update={
                    "lp_total_supply": (S(pair.lp_total_supply) + S(quote.liquidity)).value,
                    "k_last": self._k_last(new0.amount, new1.amount),
                    **self._cumulative_update(
                        pair, reserve0, reserve1, quote.amount0, quote.amount1
                    ),
                }
            )
            if existing is None:
                self.registry.register(op, pair)
            else:
                self.registry.save(op, pair)

            custody = pool_account(pair_id)
            op.transfer(token0, quote.amount0, sender, custody)
            op.transfer(token1, quote.amount1, sender, custody)
            op.mint(pair.lp_color, quote.liquidity - locked, recipient)
            op.mint(pair.lp_color, locked, DEAD_ACCOUNT)

        logger.info(
            "liquidity_added",
            pair=short_id(pair_id),
            created=existing is None,
            amount0=quote.amount0,
            amount1=quote.amount1,
            liquidity=quote.liquidity,
            lp_total_supply=pair.lp_total_supply,
        )
        if existing is None:
            logger.info("pair_created", pair=short_id(pair_id), token0=short_id(token0), token1=short_id(token1))

        amount_a, amount_b = _caller_order(token_a, token0, quote.amount0, quote.amount1)
        return AddLiquidityResult(
            pair_id=pair_id,
            amount_a=amount_a,
            amount_b=amount_b,
            amount0=quote.amount0,
            amount1=quote.amount1,
            liquidity=quote.liquidity - locked,
            created=existing is None,
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
        """Burn liquidity shares for a pro-rata cut of both reserves.

        Args:
            token_a: Color of the first token (any order)
            token_b: Color of the second token
            liquidity: Shares to burn
            amount_a_min: Least of token A to accept
            amount_b_min: Least of token B to accept
            recipient: Account receiving the withdrawn tokens
            sender: Account whose shares are burnt (default: recipient)

        Returns:
            RemoveLiquidityResult with amounts paid out

        Raises:
            InvalidInput: If liquidity is not positive or a minimum is negative
            PairNotFound: If the pair does not exist
            InsufficientLiquidity: If liquidity exceeds the LP supply, or the
                withdrawal would pay out nothing of either token
            SlippageExceeded: If a payout is below its minimum
            TokenAccountingError: If the sender does not hold the shares
        """
        require_positive("liquidity", liquidity)
        require_non_negative("amount_a_min", amount_a_min)
        require_non_negative("amount_b_min", amount_b_min)
        require_account("recipient", recipient)
        sender = recipient if sender is None else sender
        require_account("sender", sender)

        token0, token1, amount0_min, amount1_min = sort_amounts(
            token_a, token_b, amount_a_min, amount_b_min
        )
        pair_id = derive_pair_id(token0, token1)

        with self.locks.hold(pair_id), atomic(self.store, self.tokens, "remove_liquidity") as op:
            pair = self._require_pair(pair_id, op)
            reserve0, reserve1 = self.reserves.amounts_of(pair, op)
            pair = self._mint_protocol_fee(op, pair, reserve0, reserve1)

            if liquidity > pair.lp_total_supply:
                raise InsufficientLiquidity(
                    f"remove_liquidity: {liquidity} exceeds LP supply {pair.lp_total_supply}"
                )
            amount0, amount1 = withdrawal_amounts(
                liquidity, pair.lp_total_supply, reserve0, reserve1
            )
            if amount0 < amount0_min or amount1 < amount1_min:
                raise SlippageExceeded(
                    f"remove_liquidity: payout ({amount0}, {amount1}) "
                    f"below minimum ({amount0_min}, {amount1_min})"
                )
            if amount0 == 0 or amount1 == 0:
                raise InsufficientLiquidity("remove_liquidity: insufficient liquidity burned")

            new0 = self.reserves.debit(op, pair_id, token0, amount0)
            new1 = self.reserves.debit(op, pair_id, token1, amount1)
            pair = pair.model_copy(
                update={
                    "lp_total_supply": (S(pair.lp_total_supply) - S(liquidity)).value,
                    "k_last": self._k_last(new0.amount, new1.amount),
                    **self._cumulative_update(pair, reserve0, reserve1, amount0, amount1),
                }
            )
            self.registry.save(op, pair)

            custody = pool_account(pair_id)
            op.burn(pair.lp_color, liquidity, sender)
            op.transfer(token0, amount0, custody, recipient)
            op.transfer(token1, amount1, custody, recipient)

        logger.info(
            "liquidity_removed",
            pair=short_id(pair_id),
            amount0=amount0,
            amount1=amount1,
            liquidity=liquidity,
            lp_total_supply=pair.lp_total_supply,
            drained=new0.amount == 0 and new1.amount == 0,
        )

        amount_a, amount_b = _caller_order(token_a, token0, amount0, amount1)
        return RemoveLiquidityResult(
            pair_id=pair_id,
            amount_a=amount_a,
            amount_b=amount_b,
            amount0=amount0,
            amount1=amount1,
            liquidity=liquidity,
        )

    def _mint_protocol_fee(
        self, op: AtomicOperation, pair: Pair, reserve0: int, reserve1: int
    ) -> Pair:
        """Stage the protocol's fee shares and return the pair with its new supply."""
        fee_to = self.config.protocol_fee_to
        if fee_to is None:
            if pair.k_last != 0:
                return pair.model_copy(update={"k_last": 0})
            return pair

        fee_liquidity = protocol_fee_liquidity(
            pair.lp_total_supply, reserve0, reserve1, pair.k_last
        )
        if fee_liquidity == 0:
            return pair
        op.mint(pair.lp_color, fee_liquidity, fee_to)
        logger.debug("protocol_fee_minted", pair=short_id(pair.pair_id), liquidity=fee_liquidity)
        return pair.model_copy(
            update={"lp_total_supply": (S(pair.lp_total_supply) + S(fee_liquidity)).value}
        )

    def _k_last(self, reserve0: int, reserve1: int) -> int:
        if not self.config.fee_enabled:
            return 0
        return (S(reserve0) * S(reserve1)).value


def _caller_order(
    token_a: bytes | str, token0: bytes, amount0: int, amount1: int
) -> tuple[int, int]:
    if to_color(token_a) == token0:
        return amount0, amount1
    return amount1, amount0
