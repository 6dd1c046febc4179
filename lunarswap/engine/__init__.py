"""Mutating engines and the machinery that keeps their operations atomic."""

from lunarswap.engine.base import EngineBase
from lunarswap.engine.context import AtomicOperation, atomic
from lunarswap.engine.liquidity import LiquidityEngine
from lunarswap.engine.locks import PairLocks
from lunarswap.engine.swap import SwapEngine

__all__ = [
    "AtomicOperation",
    "EngineBase",
    "LiquidityEngine",
    "PairLocks",
    "SwapEngine",
    "atomic",
]
