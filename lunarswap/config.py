"""Engine configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from lunarswap.constants import BPS_DENOMINATOR, DEFAULT_FEE_BPS, MAX_AMOUNT
from lunarswap.errors import InvalidInput
from lunarswap.safe_int import UINT256_MAX


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for the exchange engine.

    Holds the swap fee and the optional protocol-level behaviors so tests can
    run the same engine under different settings.

    Attributes:
        fee_bps: Swap fee in basis points (default: 30 = 0.3%)
        protocol_fee_to: Account credited with the protocol's share of fee
            growth. None disables protocol fees and keeps kLast at zero.
        minimum_liquidity: Shares locked forever on a pair's first deposit.
            Zero (default) gives the depositor the full geometric mean.
        max_amount: Upper bound on any reserve balance
            (default: 2^128-1).
    """

    fee_bps: int = DEFAULT_FEE_BPS
    protocol_fee_to: str | None = None
    minimum_liquidity: int = 0
    max_amount: int = MAX_AMOUNT

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps <= BPS_DENOMINATOR:
            raise InvalidInput(
                f"fee_bps must be between 0 and {BPS_DENOMINATOR}, got {self.fee_bps}"
            )
        if self.minimum_liquidity < 0:
            raise InvalidInput(
                f"minimum_liquidity cannot be negative: {self.minimum_liquidity}"
            )
        if not 0 < self.max_amount <= UINT256_MAX:
            raise InvalidInput(f"max_amount must be in (0, 2^256-1]: {self.max_amount}")
        if self.protocol_fee_to == "":
            raise InvalidInput("protocol_fee_to cannot be empty")

    @property
    def fee_enabled(self) -> bool:
        """True if the protocol fee is switched on."""
        return self.protocol_fee_to is not None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config from environment variables.

        - LUNARSWAP_FEE_BPS: Swap fee in basis points (default: 30)
        - LUNARSWAP_PROTOCOL_FEE_TO: Protocol fee recipient (default: disabled)
        - LUNARSWAP_MINIMUM_LIQUIDITY: Locked bootstrap shares (default: 0)
        - LUNARSWAP_MAX_AMOUNT: Amount bound (default: 2^128-1)

        Raises:
            InvalidInput: If a variable is not a valid integer or out of range
        """
        env = os.environ if environ is None else environ
        return cls(
            fee_bps=_int_var(env, "LUNARSWAP_FEE_BPS", DEFAULT_FEE_BPS),
            protocol_fee_to=env.get("LUNARSWAP_PROTOCOL_FEE_TO") or None,
            minimum_liquidity=_int_var(env, "LUNARSWAP_MINIMUM_LIQUIDITY", 0),
            max_amount=_int_var(env, "LUNARSWAP_MAX_AMOUNT", MAX_AMOUNT),
        )


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise InvalidInput(f"{name} must be an integer, got '{raw}'") from err


# Default configuration instance
DEFAULT_CONFIG = EngineConfig()
