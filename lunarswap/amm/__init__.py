"""Pricing and liquidity math."""

from lunarswap.amm.base import AMM
from lunarswap.amm.constant_product import (
    ConstantProductAMM,
    constant_product,
    quote_in,
    quote_out,
)
from lunarswap.amm.liquidity import (
    AddLiquidityAmounts,
    DepositQuote,
    RemoveLiquidityMinimums,
    calculate_add_liquidity_amounts,
    calculate_minimum_amount,
    calculate_optimal_amounts,
    calculate_optimal_dependent_amount,
    calculate_remove_liquidity_minimums,
    compute_amount_in_max,
    compute_amount_out_min,
    has_liquidity,
    is_valid_liquidity_amounts,
)

__all__ = [
    # Base classes
    "AMM",
    # Constant product
    "ConstantProductAMM",
    "constant_product",
    "quote_out",
    "quote_in",
    # Client-side liquidity helpers
    "AddLiquidityAmounts",
    "DepositQuote",
    "RemoveLiquidityMinimums",
    "calculate_add_liquidity_amounts",
    "calculate_minimum_amount",
    "calculate_optimal_amounts",
    "calculate_optimal_dependent_amount",
    "calculate_remove_liquidity_minimums",
    "compute_amount_in_max",
    "compute_amount_out_min",
    "has_liquidity",
    "is_valid_liquidity_amounts",
]
