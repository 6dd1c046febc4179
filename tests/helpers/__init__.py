"""Test helpers module for shared test utilities.

- constants: Token colors, accounts and balances
- factories: Exchange, funding and pool factory functions
"""

from tests.helpers.constants import (
    ALICE,
    ALL_COLORS,
    BAR,
    BOB,
    CAROL,
    DUST,
    FOO,
    INITIAL_BALANCE,
    NIGHT,
    TREASURY,
    USDC,
    color,
)
from tests.helpers.factories import fund, make_exchange, make_pool

__all__ = [
    # Constants
    "NIGHT",
    "DUST",
    "USDC",
    "FOO",
    "BAR",
    "ALL_COLORS",
    "ALICE",
    "BOB",
    "CAROL",
    "TREASURY",
    "INITIAL_BALANCE",
    "color",
    # Factories
    "fund",
    "make_exchange",
    "make_pool",
]
