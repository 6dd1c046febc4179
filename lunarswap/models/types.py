"""Shared type definitions for engine records.

Token colors are 32-byte opaque values. They are compared as big-endian
unsigned integers, which for equal-length ``bytes`` is plain byte-wise
comparison.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from lunarswap.constants import COLOR_LENGTH
from lunarswap.errors import InvalidPair
from lunarswap.safe_int import UINT256_MAX


def to_color(value: Any) -> bytes:
    """Normalize a token color to 32 raw bytes.

    Args:
        value: ``bytes``/``bytearray`` of length 32, or a 64-char hex string
            (with or without 0x prefix)

    Returns:
        The color as immutable bytes

    Raises:
        InvalidPair: If value is not a valid 32-byte color
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        color = bytes(value)
    elif isinstance(value, str):
        text = value[2:] if value.lower().startswith("0x") else value
        try:
            color = bytes.fromhex(text)
        except ValueError as err:
            raise InvalidPair(f"Token color must be hex: '{value}'") from err
    else:
        raise InvalidPair(f"Token color must be bytes or hex string, got {type(value).__name__}")

    if len(color) != COLOR_LENGTH:
        raise InvalidPair(f"Token color must be {COLOR_LENGTH} bytes, got {len(color)}")
    return color


def is_valid_color(value: Any) -> bool:
    """Check if a value can be used as a token color."""
    try:
        to_color(value)
    except InvalidPair:
        return False
    return True


def color_hex(color: bytes) -> str:
    """Render a color as 0x-prefixed lowercase hex."""
    return "0x" + color.hex()


def _validate_amount(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Amount must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Amount cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Amount overflow: {value} > 2^256-1")
    return value


# 32-byte token color / identifier, accepts hex on input
Color = Annotated[bytes, BeforeValidator(to_color)]

# Derived 32-byte identifier (pair id, reserve id)
Identifier = Annotated[bytes, Field(min_length=32, max_length=32)]

# Unsigned 256-bit amount held as a Python int
Amount = Annotated[
    int,
    BeforeValidator(_validate_amount),
    Field(description="Unsigned 256-bit integer amount"),
]
