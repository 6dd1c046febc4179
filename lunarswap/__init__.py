"""Lunarswap - constant-product AMM exchange engine."""

from lunarswap.config import DEFAULT_CONFIG, EngineConfig
from lunarswap.lunarswap import Lunarswap, create_lunarswap

__version__ = "0.1.0"
__all__ = ["DEFAULT_CONFIG", "EngineConfig", "Lunarswap", "create_lunarswap", "__version__"]
