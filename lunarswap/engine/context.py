"""All-or-nothing operation context.

An AtomicOperation pairs a store transaction with a journal of token
operations. Engines read and stage writes through it; nothing becomes
visible until commit. At commit the token operations are applied first,
and if any of them fails the ones already applied are undone in reverse
order before the error propagates, so the store transaction is dropped
with reserves and balances exactly as they were.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from lunarswap.storage import KeyValueStore
from lunarswap.tokens import TokenAccounting, TokenOperation, TokenOperationKind

logger = structlog.get_logger()


class AtomicOperation:
    """Staged reads/writes and token operations for one entry-point call."""

    def __init__(self, store: KeyValueStore, tokens: TokenAccounting, name: str) -> None:
        self.name = name
        self._tokens = tokens
        self._txn = store.transaction()
        self._journal: list[TokenOperation] = []

    # --- StoreView ---

    def get(self, key: bytes) -> Any | None:
        return self._txn.get(key)

    def scan(self, prefix: bytes) -> Iterator[tuple[bytes, Any]]:
        return self._txn.scan(prefix)

    def put(self, key: bytes, value: Any) -> None:
        self._txn.put(key, value)

    def increment(self, key: bytes, by: int = 1) -> None:
        self._txn.increment(key, by)

    # --- Token journal ---

    @property
    def token_operations(self) -> list[TokenOperation]:
        return list(self._journal)

    def mint(self, color: bytes, amount: int, recipient: str) -> None:
        if amount > 0:
            self._journal.append(
                TokenOperation(TokenOperationKind.MINT, color, amount, recipient=recipient)
            )

    def burn(self, color: bytes, amount: int, holder: str) -> None:
        if amount > 0:
            self._journal.append(
                TokenOperation(TokenOperationKind.BURN, color, amount, sender=holder)
            )

    def transfer(self, color: bytes, amount: int, sender: str, recipient: str) -> None:
        if amount > 0:
            self._journal.append(
                TokenOperation(
                    TokenOperationKind.TRANSFER, color, amount, sender=sender, recipient=recipient
                )
            )

    # --- Completion ---

    def commit(self) -> None:
        applied: list[TokenOperation] = []
        try:
            for operation in self._journal:
                operation.apply(self._tokens)
                applied.append(operation)
            self._txn.commit()
        except Exception:
            self._compensate(applied)
            self._txn.rollback()
            raise

    def rollback(self) -> None:
        self._txn.rollback()

    def _compensate(self, applied: list[TokenOperation]) -> None:
        # Every inverse is attempted; the caller re-raises the original error.
        for operation in reversed(applied):
            try:
                operation.inverse().apply(self._tokens)
            except Exception as err:
                logger.error(
                    "token_operation_compensation_failed",
                    operation=self.name,
                    kind=operation.kind.value,
                    amount=operation.amount,
                    error=type(err).__name__,
                    detail=str(err),
                )
                continue
            logger.warning(
                "token_operation_compensated",
                operation=self.name,
                kind=operation.kind.value,
                amount=operation.amount,
            )


@contextmanager
def atomic(store: KeyValueStore, tokens: TokenAccounting, name: str) -> Iterator[AtomicOperation]:
    """Run a block as one all-or-nothing operation.

    Commits when the block exits normally; any exception, raised in the block
    or during commit, leaves committed state untouched and is re-raised.
    """
    operation = AtomicOperation(store, tokens, name)
    try:
        yield operation
    except Exception as err:
        operation.rollback()
        logger.info("operation_aborted", operation=name, error=type(err).__name__, detail=str(err))
        raise

    try:
        operation.commit()
    except Exception as err:
        logger.info("operation_aborted", operation=name, error=type(err).__name__, detail=str(err))
        raise
