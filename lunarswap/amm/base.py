"""Base class for pair pricing curves."""

from abc import ABC, abstractmethod

from lunarswap.constants import DEFAULT_FEE_BPS


class AMM(ABC):
    """Pricing curve consulted by the swap engine.

    Both directions take the pair's reserves oriented by the trade
    (input side first) and a fee in basis points charged on the input.
    """

    @abstractmethod
    def quote_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = DEFAULT_FEE_BPS,
    ) -> int:
        """Output amount for an exact input, rounded in the pool's favor."""
        ...

    @abstractmethod
    def quote_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = DEFAULT_FEE_BPS,
    ) -> int:
        """Input amount required for an exact output, rounded in the pool's favor."""
        ...
