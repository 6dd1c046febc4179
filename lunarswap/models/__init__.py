"""Records, results and shared types for the exchange engine."""

from lunarswap.models.records import Pair, PairState, Reserve
from lunarswap.models.results import AddLiquidityResult, RemoveLiquidityResult, SwapExecution
from lunarswap.models.types import Amount, Color, Identifier, color_hex, to_color

__all__ = [
    # Types
    "Amount",
    "Color",
    "Identifier",
    "color_hex",
    "to_color",
    # Records
    "Pair",
    "PairState",
    "Reserve",
    # Results
    "AddLiquidityResult",
    "RemoveLiquidityResult",
    "SwapExecution",
]
