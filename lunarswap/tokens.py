"""Token-accounting collaborator.

The engine never holds balances itself: deposits, withdrawals, swap legs
and LP shares are moved through a TokenAccounting implementation. Reserve
custody lives in each pair's pool account (see lunarswap.identity).
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

import structlog

from lunarswap.errors import InsufficientBalance, InvalidInput
from lunarswap.log import short_id

logger = structlog.get_logger()


@runtime_checkable
class TokenAccounting(Protocol):
    """Interface the engine requires of the token-accounting service."""

    def mint(self, color: bytes, amount: int, recipient: str) -> None:
        """Create ``amount`` of ``color`` for ``recipient``."""
        ...

    def burn(self, color: bytes, amount: int, holder: str) -> None:
        """Destroy ``amount`` of ``color`` held by ``holder``."""
        ...

    def transfer(self, color: bytes, amount: int, sender: str, recipient: str) -> None:
        """Move ``amount`` of ``color`` between holders."""
        ...

    def balance_of(self, color: bytes, holder: str) -> int:
        """Current balance of ``holder``."""
        ...

    def total_supply(self, color: bytes) -> int:
        """Total amount of ``color`` in existence."""
        ...


class TokenOperationKind(str, Enum):
    MINT = "mint"
    BURN = "burn"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class TokenOperation:
    """One journaled call to the token-accounting collaborator.

    For MINT only ``recipient`` is set, for BURN only ``sender`` (the holder).
    """

    kind: TokenOperationKind
    color: bytes
    amount: int
    sender: str | None = None
    recipient: str | None = None

    def __post_init__(self) -> None:
        needs_sender = self.kind is not TokenOperationKind.MINT
        needs_recipient = self.kind is not TokenOperationKind.BURN
        if (needs_sender and not self.sender) or (needs_recipient and not self.recipient):
            raise InvalidInput(f"Incomplete {self.kind.value} operation")

    def apply(self, tokens: TokenAccounting) -> None:
        if self.kind is TokenOperationKind.MINT:
            tokens.mint(self.color, self.amount, self.recipient)  # type: ignore[arg-type]
        elif self.kind is TokenOperationKind.BURN:
            tokens.burn(self.color, self.amount, self.sender)  # type: ignore[arg-type]
        else:
            tokens.transfer(self.color, self.amount, self.sender, self.recipient)  # type: ignore[arg-type]

    def inverse(self) -> TokenOperation:
        """Operation that undoes this one."""
        if self.kind is TokenOperationKind.MINT:
            return TokenOperation(TokenOperationKind.BURN, self.color, self.amount, sender=self.recipient)
        if self.kind is TokenOperationKind.BURN:
            return TokenOperation(TokenOperationKind.MINT, self.color, self.amount, recipient=self.sender)
        return TokenOperation(
            TokenOperationKind.TRANSFER,
            self.color,
            self.amount,
            sender=self.recipient,
            recipient=self.sender,
        )


class InMemoryTokenLedger:
    """Dictionary-backed TokenAccounting implementation.

    Balances are keyed by (color, holder); zero balances are dropped to keep
    the table sparse.
    """

    def __init__(self) -> None:
        self._balances: dict[tuple[bytes, str], int] = {}
        self._supply: dict[bytes, int] = {}
        self._lock = threading.RLock()

    def balance_of(self, color: bytes, holder: str) -> int:
        return self._balances.get((color, holder), 0)

    def total_supply(self, color: bytes) -> int:
        return self._supply.get(color, 0)

    def mint(self, color: bytes, amount: int, recipient: str) -> None:
        _check_amount(amount)
        with self._lock:
            self._set(color, recipient, self.balance_of(color, recipient) + amount)
            self._supply[color] = self.total_supply(color) + amount
        logger.debug("token_minted", color=short_id(color), amount=amount, recipient=recipient)

    def burn(self, color: bytes, amount: int, holder: str) -> None:
        _check_amount(amount)
        with self._lock:
            balance = self.balance_of(color, holder)
            if balance < amount:
                raise InsufficientBalance(
                    f"Cannot burn {amount} of {color.hex()[:12]} from {holder}: balance {balance}"
                )
            self._set(color, holder, balance - amount)
            self._supply[color] = self.total_supply(color) - amount
        logger.debug("token_burned", color=short_id(color), amount=amount, holder=holder)

    def transfer(self, color: bytes, amount: int, sender: str, recipient: str) -> None:
        _check_amount(amount)
        with self._lock:
            balance = self.balance_of(color, sender)
            if balance < amount:
                raise InsufficientBalance(
                    f"Cannot transfer {amount} of {color.hex()[:12]} from {sender}: balance {balance}"
                )
            self._set(color, sender, balance - amount)
            self._set(color, recipient, self.balance_of(color, recipient) + amount)

    def _set(self, color: bytes, holder: str, amount: int) -> None:
        if amount == 0:
            self._balances.pop((color, holder), None)
        else:
            self._balances[(color, holder)] = amount


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise InvalidInput(f"Token amount cannot be negative: {amount}")
