"""Identity derivation for pairs, reserves and LP shares.

Ids are SHA-256 digests of an ABI-encoded preimage whose first word is a
32-byte domain tag, so ids from different namespaces never collide even
when their payloads match. Order independence of pair ids is provided by
sorting the colors before hashing, never by the hash itself.
"""

from __future__ import annotations

import hashlib

from eth_abi import encode  # type: ignore[attr-defined]

from lunarswap.constants import LP_DOMAIN, PAIR_DOMAIN, RESERVE_DOMAIN
from lunarswap.errors import InvalidPair
from lunarswap.models.types import to_color


def _domain_tag(tag: bytes) -> bytes:
    return tag.ljust(32, b"\x00")


def _commit(domain: bytes, *words: bytes) -> bytes:
    preimage = encode(["bytes32"] * (len(words) + 1), [_domain_tag(domain), *words])
    return hashlib.sha256(preimage).digest()


def sort_tokens(token_a: bytes | str, token_b: bytes | str) -> tuple[bytes, bytes]:
    """Order two colors by byte-wise (big-endian numeric) value.

    Raises:
        InvalidPair: If the colors are identical or malformed
    """
    color_a, color_b = to_color(token_a), to_color(token_b)
    if color_a == color_b:
        raise InvalidPair(f"Identical token colors: {color_a.hex()}")
    if color_a < color_b:
        return color_a, color_b
    return color_b, color_a


def derive_pair_id(token_a: bytes | str, token_b: bytes | str) -> bytes:
    """Derive the id of a pair from its two colors, given in either order.

    Returns:
        32-byte pair id over the sorted colors

    Raises:
        InvalidPair: If the colors are identical or malformed
    """
    token0, token1 = sort_tokens(token_a, token_b)
    return _commit(PAIR_DOMAIN, token0, token1)


def derive_reserve_id(pair_id: bytes, token_color: bytes, sender: object = None) -> bytes:
    """Derive the id of a pair's reserve cell for one token.

    ``sender`` is accepted for interface compatibility and has no effect:
    the id depends on (pair_id, token_color) only.
    """
    del sender
    return _commit(RESERVE_DOMAIN, to_color(pair_id), to_color(token_color))


def derive_lp_color(pair_id: bytes) -> bytes:
    """Color of the liquidity shares issued by a pair."""
    return _commit(LP_DOMAIN, to_color(pair_id))


def pool_account(pair_id: bytes) -> str:
    """Custody account that holds a pair's reserves at the token ledger."""
    return f"pool:{pair_id.hex()}"
