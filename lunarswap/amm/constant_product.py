"""Constant product pricing curve.

Pairs price swaps on the curve x * y = k with a fee on the input amount.
The fee stays in the pool, so the reserve product never decreases across
a swap.
"""

from __future__ import annotations

from lunarswap.amm.base import AMM
from lunarswap.constants import BPS_DENOMINATOR, DEFAULT_FEE_BPS
from lunarswap.errors import InvalidSwapInput
from lunarswap.safe_int import S


def _check_fee(fee_bps: int) -> None:
    if not 0 <= fee_bps <= BPS_DENOMINATOR:
        raise InvalidSwapInput(
            f"Invalid fee: {fee_bps} bps. Must be between 0 and {BPS_DENOMINATOR} basis points"
        )


class ConstantProductAMM(AMM):
    """Constant product swap math.

    Formula: amount_out = (in * (10000 - fee) * res_out) / (res_in * 10000 + in * (10000 - fee))

    With the default 30 bps fee the multiplier is 9970/10000.
    """

    def quote_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = DEFAULT_FEE_BPS,
    ) -> int:
        """Calculate output amount using the constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_bps: Swap fee in basis points (default 30 = 0.3%)

        Returns:
            Output token amount, rounded down

        Raises:
            InvalidSwapInput: If any amount or reserve is zero, or fee is out of range
        """
        if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
            raise InvalidSwapInput(
                f"Invalid amounts or reserves: amount_in={amount_in}, "
                f"reserve_in={reserve_in}, reserve_out={reserve_out}"
            )
        _check_fee(fee_bps)

        amount_in_with_fee = S(amount_in) * S(BPS_DENOMINATOR - fee_bps)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).value

    def quote_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = DEFAULT_FEE_BPS,
    ) -> int:
        """Calculate required input for a desired output.

        Formula: amount_in = (res_in * out * 10000) / ((res_out - out) * (10000 - fee)) + 1

        The result rounds in the pool's favor: quote_out(quote_in(x)) >= x.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_bps: Swap fee in basis points (default 30 = 0.3%)

        Returns:
            Required input token amount

        Raises:
            InvalidSwapInput: If amount_out is not in (0, reserve_out), reserve_in
                is zero, or the fee leaves no input to price with
        """
        if amount_out <= 0 or reserve_in <= 0 or reserve_out <= 0:
            raise InvalidSwapInput(
                f"Invalid amounts or reserves: amount_out={amount_out}, "
                f"reserve_in={reserve_in}, reserve_out={reserve_out}"
            )
        if amount_out >= reserve_out:
            raise InvalidSwapInput(
                f"Can't extract {amount_out} from a reserve of {reserve_out}"
            )
        _check_fee(fee_bps)
        if fee_bps == BPS_DENOMINATOR:
            raise InvalidSwapInput("A 100% fee admits no input for a positive output")

        numerator = S(reserve_in) * S(amount_out) * S(BPS_DENOMINATOR)
        denominator = (S(reserve_out) - S(amount_out)) * S(BPS_DENOMINATOR - fee_bps)

        return ((numerator // denominator) + S(1)).value


# Singleton instance
constant_product = ConstantProductAMM()


def quote_out(
    amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS
) -> int:
    """Module-level shortcut for ``constant_product.quote_out``."""
    return constant_product.quote_out(amount_in, reserve_in, reserve_out, fee_bps)


def quote_in(
    amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS
) -> int:
    """Module-level shortcut for ``constant_product.quote_in``."""
    return constant_product.quote_in(amount_out, reserve_in, reserve_out, fee_bps)


__all__ = [
    "ConstantProductAMM",
    "constant_product",
    "quote_out",
    "quote_in",
]
