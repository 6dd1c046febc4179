"""Result types returned by the mutating entry points."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AddLiquidityResult:
    """Outcome of a liquidity deposit.

    Attributes:
        pair_id: Pair that received the deposit
        amount_a: Amount of the caller's token A taken
        amount_b: Amount of the caller's token B taken
        amount0: Amount of canonical token0 taken
        amount1: Amount of canonical token1 taken
        liquidity: LP shares credited to the recipient
        created: True if this deposit created the pair
    """

    pair_id: bytes
    amount_a: int
    amount_b: int
    amount0: int
    amount1: int
    liquidity: int
    created: bool = False


@dataclass(frozen=True)
class RemoveLiquidityResult:
    """Outcome of a liquidity withdrawal."""

    pair_id: bytes
    amount_a: int
    amount_b: int
    amount0: int
    amount1: int
    liquidity: int


@dataclass(frozen=True)
class SwapExecution:
    """Outcome of an executed swap."""

    pair_id: bytes
    token_in: bytes
    token_out: bytes
    amount_in: int
    amount_out: int
