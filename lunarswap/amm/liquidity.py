"""Liquidity math shared by the engine and by clients.

Callers precompute their slippage bounds with the same functions the engine
uses to check them: calculate_add_liquidity_amounts() before a deposit,
calculate_remove_liquidity_minimums() before a withdrawal, and
compute_amount_out_min() / compute_amount_in_max() around swap quotes.
"""

from __future__ import annotations

from dataclasses import dataclass

from lunarswap.constants import BPS_DENOMINATOR, PROTOCOL_FEE_DENOMINATOR, SLIPPAGE_TOLERANCE
from lunarswap.errors import InsufficientLiquidity, InvalidInput, InvalidSlippage
from lunarswap.safe_int import UINT256_MAX, S

_WRAP = UINT256_MAX + 1


@dataclass(frozen=True)
class AddLiquidityAmounts:
    """Optimal and minimum deposit amounts, in the caller's token order."""

    amount_a_optimal: int
    amount_b_optimal: int
    amount_a_min: int
    amount_b_min: int


@dataclass(frozen=True)
class RemoveLiquidityMinimums:
    """Minimum withdrawal amounts, in the caller's token order."""

    amount_a_min: int
    amount_b_min: int


@dataclass(frozen=True)
class DepositQuote:
    """Amounts the pair takes for a deposit and the shares it mints."""

    amount0: int
    amount1: int
    liquidity: int


def _check_slippage(slippage_tolerance_bps: int) -> None:
    if not 0 <= slippage_tolerance_bps <= BPS_DENOMINATOR:
        raise InvalidSlippage(
            f"Invalid slippage tolerance: {slippage_tolerance_bps}. "
            f"Must be between 0 and {BPS_DENOMINATOR} basis points"
        )


def calculate_minimum_amount(optimal_amount: int, slippage_tolerance_bps: int) -> int:
    """Lower bound on an amount after applying a slippage tolerance.

    Formula: floor(optimal * (10000 - slippage) / 10000)

    Raises:
        InvalidSlippage: If slippage_tolerance_bps is not in [0, 10000]
    """
    _check_slippage(slippage_tolerance_bps)
    return (S(optimal_amount) * S(BPS_DENOMINATOR - slippage_tolerance_bps) // BPS_DENOMINATOR).value


def compute_amount_out_min(expected_output: int, slippage_tolerance_bps: int) -> int:
    """Minimum output to accept for an exact-input swap."""
    return calculate_minimum_amount(expected_output, slippage_tolerance_bps)


def compute_amount_in_max(expected_input: int, slippage_tolerance_bps: int) -> int:
    """Maximum input to allow for an exact-output swap (rounds up)."""
    _check_slippage(slippage_tolerance_bps)
    scaled = S(expected_input) * S(BPS_DENOMINATOR + slippage_tolerance_bps)
    return scaled.ceiling_div(BPS_DENOMINATOR).value


def calculate_optimal_dependent_amount(
    independent_amount: int,
    reserve_independent: int,
    reserve_dependent: int,
) -> int:
    """Amount of the dependent token that matches the pool price.

    Formula: floor(independent_amount * reserve_dependent / reserve_independent)

    Raises:
        InvalidInput: If any argument is not positive
    """
    if independent_amount <= 0 or reserve_independent <= 0 or reserve_dependent <= 0:
        raise InvalidInput(
            f"Invalid amounts or reserves: amount={independent_amount}, "
            f"reserves=({reserve_independent}, {reserve_dependent})"
        )
    return (S(independent_amount) * S(reserve_dependent) // S(reserve_independent)).value


def calculate_optimal_amounts(
    amount_a_desired: int,
    amount_b_desired: int,
    reserve_a: int,
    reserve_b: int,
) -> tuple[int, int]:
    """Amounts to deposit into an existing pair without moving its price.

    Uses all of amount A when the matching amount of B fits within
    amount_b_desired, otherwise all of amount B.

    Returns:
        Tuple of (amount_a_optimal, amount_b_optimal)
    """
    if amount_a_desired <= 0 or amount_b_desired <= 0:
        raise InvalidInput(
            f"Desired amounts must be positive: ({amount_a_desired}, {amount_b_desired})"
        )
    amount_b_from_a = calculate_optimal_dependent_amount(amount_a_desired, reserve_a, reserve_b)
    if amount_b_from_a <= amount_b_desired:
        return amount_a_desired, amount_b_from_a

    amount_a_from_b = calculate_optimal_dependent_amount(amount_b_desired, reserve_b, reserve_a)
    return amount_a_from_b, amount_b_desired


def calculate_add_liquidity_amounts(
    amount_a_desired: int,
    amount_b_desired: int,
    reserve_a: int,
    reserve_b: int,
    slippage_tolerance_bps: int = SLIPPAGE_TOLERANCE.LOW,
) -> AddLiquidityAmounts:
    """Optimal and minimum amounts for an add_liquidity call.

    For a new or drained pair the optimal amounts are the desired amounts.

    Example:
        >>> calculate_add_liquidity_amounts(1000, 1000, 2000, 1000, 50)
        AddLiquidityAmounts(amount_a_optimal=1000, amount_b_optimal=500, amount_a_min=995, amount_b_min=497)
    """
    if reserve_a == 0 and reserve_b == 0:
        amount_a_optimal, amount_b_optimal = amount_a_desired, amount_b_desired
    else:
        amount_a_optimal, amount_b_optimal = calculate_optimal_amounts(
            amount_a_desired, amount_b_desired, reserve_a, reserve_b
        )

    return AddLiquidityAmounts(
        amount_a_optimal=amount_a_optimal,
        amount_b_optimal=amount_b_optimal,
        amount_a_min=calculate_minimum_amount(amount_a_optimal, slippage_tolerance_bps),
        amount_b_min=calculate_minimum_amount(amount_b_optimal, slippage_tolerance_bps),
    )


def calculate_remove_liquidity_minimums(
    liquidity: int,
    total_supply: int,
    reserve_a: int,
    reserve_b: int,
    slippage_tolerance_bps: int = SLIPPAGE_TOLERANCE.LOW,
) -> RemoveLiquidityMinimums:
    """Minimum amounts for a remove_liquidity call.

    Raises:
        InvalidInput: If any argument is not positive
        InsufficientLiquidity: If liquidity exceeds total_supply
    """
    if liquidity <= 0 or total_supply <= 0 or reserve_a <= 0 or reserve_b <= 0:
        raise InvalidInput("Invalid amounts or reserves")
    if liquidity > total_supply:
        raise InsufficientLiquidity(
            f"Cannot remove {liquidity} LP shares from a supply of {total_supply}"
        )
    amount_a, amount_b = withdrawal_amounts(liquidity, total_supply, reserve_a, reserve_b)
    return RemoveLiquidityMinimums(
        amount_a_min=calculate_minimum_amount(amount_a, slippage_tolerance_bps),
        amount_b_min=calculate_minimum_amount(amount_b, slippage_tolerance_bps),
    )


def has_liquidity(reserve_a: int, reserve_b: int) -> bool:
    """True if both reserves are non-empty."""
    return reserve_a > 0 and reserve_b > 0


def is_valid_liquidity_amounts(amount_a: int, amount_b: int) -> bool:
    """True if both deposit amounts are positive."""
    return amount_a > 0 and amount_b > 0


# --- Engine-side share math ---


def quote_deposit(
    amount0_desired: int,
    amount1_desired: int,
    reserve0: int,
    reserve1: int,
    total_supply: int,
) -> DepositQuote:
    """Amounts a pair takes for a deposit and the LP shares minted for it.

    Bootstrap (both reserves zero): the desired amounts are taken as-is and
    floor(sqrt(amount0 * amount1)) shares are minted. Otherwise the deposit
    is trimmed to the pool price and shares are minted pro rata to the
    smaller of the two contributions.
    """
    if reserve0 == 0 and reserve1 == 0:
        minted = (S(amount0_desired) * S(amount1_desired)).isqrt()
        return DepositQuote(amount0_desired, amount1_desired, minted.value)

    amount0, amount1 = calculate_optimal_amounts(
        amount0_desired, amount1_desired, reserve0, reserve1
    )
    supply = S(total_supply)
    minted = (S(amount0) * supply // S(reserve0)).min(S(amount1) * supply // S(reserve1))
    return DepositQuote(amount0, amount1, minted.value)


def withdrawal_amounts(
    liquidity: int, total_supply: int, reserve0: int, reserve1: int
) -> tuple[int, int]:
    """Pro-rata share of each reserve for burning ``liquidity`` shares."""
    supply = S(total_supply)
    amount0 = S(liquidity) * S(reserve0) // supply
    amount1 = S(liquidity) * S(reserve1) // supply
    return amount0.value, amount1.value


def protocol_fee_liquidity(
    total_supply: int, reserve0: int, reserve1: int, k_last: int
) -> int:
    """Shares owed to the protocol for fee growth since the last liquidity event.

    Formula: supply * (rootK - rootKLast) / (5 * rootK + rootKLast), i.e. one
    sixth of the growth in sqrt(k). Zero when k has not grown or k_last is 0.
    """
    if k_last == 0:
        return 0
    root_k = (S(reserve0) * S(reserve1)).isqrt()
    root_k_last = S(k_last).isqrt()
    if root_k <= root_k_last:
        return 0
    numerator = S(total_supply) * (root_k - root_k_last)
    denominator = root_k * PROTOCOL_FEE_DENOMINATOR + root_k_last
    return (numerator // denominator).value


def accumulate_volume(
    cumulatives: tuple[int, int, int, int],
    reserve0: int,
    reserve1: int,
    amount0: int,
    amount1: int,
) -> tuple[int, int, int, int]:
    """Fold one reserve movement into a pair's volume-weighted price counters.

    ``cumulatives`` is (price0_vol, price1_vol, volume0, volume1). Each token's
    volume grows by the amount that moved on its side, and each price counter
    by that volume times the pre-movement price of the token in terms of the
    other (reserve1 // reserve0 for token0), rounded down. A pair with an
    empty reserve has no price, so bootstrap deposits leave the counters
    unchanged. Counters wrap modulo 2^256.
    """
    if reserve0 == 0 or reserve1 == 0:
        return cumulatives
    price0_vol, price1_vol, volume0, volume1 = cumulatives
    return (
        (price0_vol + reserve1 // reserve0 * amount0) % _WRAP,
        (price1_vol + reserve0 // reserve1 * amount1) % _WRAP,
        (volume0 + amount0) % _WRAP,
        (volume1 + amount1) % _WRAP,
    )
