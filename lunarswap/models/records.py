"""Pydantic models for persisted engine records.

Records are frozen: every state change produces a new record via
``model_copy(update=...)`` that is staged in a store transaction.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from lunarswap.models.types import Amount, Color, Identifier


class PairState(str, Enum):
    """Lifecycle state of a token pair."""

    NONEXISTENT = "nonexistent"
    ACTIVE = "active"  # reserves > 0
    DRAINED = "drained"  # record persists, reserves == 0


class Pair(BaseModel):
    """A canonical two-token venue and its aggregate LP state."""

    pair_id: Identifier = Field(description="Deterministic id over the sorted colors.")
    token0: Color = Field(description="Lower token color.")
    token1: Color = Field(description="Higher token color.")
    lp_color: Identifier = Field(description="Color of this pair's LP shares.")
    lp_total_supply: Amount = 0
    k_last: Amount = Field(
        default=0,
        description="reserve0 * reserve1 after the last liquidity event (0 if protocol fee off).",
    )
    price0_vol_cumulative: Amount = Field(
        default=0, description="Sum of token0 volume times token0's price in token1."
    )
    price1_vol_cumulative: Amount = Field(
        default=0, description="Sum of token1 volume times token1's price in token0."
    )
    volume0_cumulative: Amount = Field(default=0, description="Token0 moved through the pair.")
    volume1_cumulative: Amount = Field(default=0, description="Token1 moved through the pair.")

    model_config = {"frozen": True}

    @property
    def cumulatives(self) -> tuple[int, int, int, int]:
        return (
            self.price0_vol_cumulative,
            self.price1_vol_cumulative,
            self.volume0_cumulative,
            self.volume1_cumulative,
        )

    @model_validator(mode="after")
    def _check_order(self) -> "Pair":
        if not self.token0 < self.token1:
            raise ValueError("Pair tokens must be strictly ordered (token0 < token1)")
        return self

    def other(self, color: bytes) -> bytes:
        """Return the opposite token of the pair."""
        if color == self.token0:
            return self.token1
        if color == self.token1:
            return self.token0
        raise ValueError(f"Token {color.hex()} not in pair")


class Reserve(BaseModel):
    """Ledger-tracked balance of one token held by a pair."""

    reserve_id: Identifier
    pair_id: Identifier
    token_color: Color
    amount: Amount = 0

    model_config = {"frozen": True}
