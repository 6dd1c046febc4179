"""Lunarswap error classes.

Every failure is raised before any ledger mutation is committed, so an
exception from an entry point always means the ledger is unchanged.
Checked-math errors are defined in lunarswap.safe_int and re-exported here.
"""

from lunarswap.safe_int import (
    ArithmeticOverflow,
    ArithmeticUnderflow,
    DivisionByZero,
    SafeIntError,
)


class LunarswapError(Exception):
    """Base error for engine operations."""

    pass


class InvalidInput(LunarswapError, ValueError):
    """Zero or negative amount, out-of-range fee or slippage."""

    pass


class InvalidPair(InvalidInput):
    """Identical or malformed token colors."""

    pass


class InvalidSlippage(InvalidInput):
    """Slippage tolerance must be in range [0, 10000] basis points."""

    pass


class InvalidSwapInput(InvalidInput):
    """Swap quote called with a zero amount, empty reserve or bad fee."""

    pass


class PairNotFound(LunarswapError, LookupError):
    """No pair has been created for the token combination."""

    pass


class InsufficientReserve(LunarswapError):
    """A debit would drive a reserve below zero."""

    pass


class InsufficientLiquidity(LunarswapError):
    """Not enough LP supply, or an operation would mint/burn nothing."""

    pass


class SlippageExceeded(LunarswapError):
    """Executed amount is worse than the caller's bound."""

    pass


class TokenAccountingError(LunarswapError):
    """Token-accounting collaborator rejected a mint, burn or transfer."""

    pass


class InsufficientBalance(TokenAccountingError):
    """Holder does not own enough of a token."""

    pass


__all__ = [
    "LunarswapError",
    "InvalidInput",
    "InvalidPair",
    "InvalidSlippage",
    "InvalidSwapInput",
    "PairNotFound",
    "InsufficientReserve",
    "InsufficientLiquidity",
    "SlippageExceeded",
    "TokenAccountingError",
    "InsufficientBalance",
    "SafeIntError",
    "ArithmeticOverflow",
    "ArithmeticUnderflow",
    "DivisionByZero",
]
