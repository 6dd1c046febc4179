"""Protocol constants for the Lunarswap engine.

Centralizes basis-point math parameters, slippage presets and the domain
tags used to derive pair, reserve and LP identities.
"""

from lunarswap.safe_int import UINT128_MAX, UINT256_MAX

# Basis-point denominator for fees and slippage (10000 bps = 100%)
BPS_DENOMINATOR = 10_000

# Default swap fee (30 bps = 0.3%)
DEFAULT_FEE_BPS = 30

# Token colors are fixed-length opaque identifiers
COLOR_LENGTH = 32

# Default cap on reserves and amounts (128-bit reserve cells)
MAX_AMOUNT = UINT128_MAX

# Protocol fee takes 1/6 of the growth in sqrt(k): supply * dk / (5 * rootK + rootKLast)
PROTOCOL_FEE_DENOMINATOR = 5

# Domain tags for the identity primitive (right-padded to 32 bytes)
PAIR_DOMAIN = b"lunarswap:pair"
RESERVE_DOMAIN = b"lunarswap:reserve"
LP_DOMAIN = b"lunarswap:lp"

# Holder of permanently locked minimum-liquidity shares
DEAD_ACCOUNT = "lunarswap:dead"


class SLIPPAGE_TOLERANCE:  # noqa: N801
    """Common slippage tolerance presets in basis points."""

    VERY_LOW = 10  # 0.1%
    LOW = 50  # 0.5%
    MEDIUM = 100  # 1%
    HIGH = 500  # 5%
    VERY_HIGH = 1000  # 10%


__all__ = [
    "BPS_DENOMINATOR",
    "DEFAULT_FEE_BPS",
    "COLOR_LENGTH",
    "MAX_AMOUNT",
    "PROTOCOL_FEE_DENOMINATOR",
    "PAIR_DOMAIN",
    "RESERVE_DOMAIN",
    "LP_DOMAIN",
    "DEAD_ACCOUNT",
    "SLIPPAGE_TOLERANCE",
    "UINT128_MAX",
    "UINT256_MAX",
]
