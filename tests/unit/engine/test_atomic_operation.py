"""Tests for the all-or-nothing operation context and pair locks."""

import threading

import pytest
from structlog.testing import capture_logs

from lunarswap.engine import PairLocks, atomic
from lunarswap.errors import InsufficientBalance
from lunarswap.tokens import InMemoryTokenLedger
from tests.helpers import ALICE, BOB, DUST, NIGHT


class _BurnFailingLedger(InMemoryTokenLedger):
    def burn(self, color, amount, holder):
        raise RuntimeError("burn unavailable")


class TestAtomic:
    """Tests for atomic()."""

    def test_commits_on_clean_exit(self, store, tokens):
        """Writes and token operations land together."""
        tokens.mint(NIGHT, 100, ALICE)
        with atomic(store, tokens, "test") as op:
            op.put(b"a", 1)
            op.increment(b"count")
            op.transfer(NIGHT, 40, ALICE, BOB)
            assert tokens.balance_of(NIGHT, BOB) == 0  # deferred to commit

        assert store.get(b"a") == 1
        assert store.get(b"count") == 1
        assert tokens.balance_of(NIGHT, BOB) == 40

    def test_exception_in_block_discards_everything(self, store, tokens):
        """An error inside the block leaves store and balances untouched."""
        tokens.mint(NIGHT, 100, ALICE)
        with pytest.raises(RuntimeError, match="boom"):
            with atomic(store, tokens, "test") as op:
                op.put(b"a", 1)
                op.mint(DUST, 5, BOB)
                raise RuntimeError("boom")

        assert store.get(b"a") is None
        assert tokens.balance_of(DUST, BOB) == 0

    def test_failed_token_operation_compensates(self, store, tokens):
        """Applied token operations are undone when a later one fails."""
        tokens.mint(NIGHT, 100, ALICE)
        with pytest.raises(InsufficientBalance):
            with atomic(store, tokens, "test") as op:
                op.put(b"a", 1)
                op.transfer(NIGHT, 60, ALICE, BOB)
                op.mint(DUST, 7, BOB)
                op.transfer(DUST, 1, ALICE, BOB)  # ALICE holds no DUST

        assert store.get(b"a") is None
        assert tokens.balance_of(NIGHT, ALICE) == 100
        assert tokens.balance_of(NIGHT, BOB) == 0
        assert tokens.balance_of(DUST, BOB) == 0
        assert tokens.total_supply(DUST) == 0

    def test_failed_compensation_keeps_going(self, store):
        """A failing inverse is logged, later inverses still run and the original error surfaces."""
        tokens = _BurnFailingLedger()
        tokens.mint(NIGHT, 100, ALICE)
        with capture_logs() as logs:
            with pytest.raises(InsufficientBalance):
                with atomic(store, tokens, "test") as op:
                    op.transfer(NIGHT, 60, ALICE, BOB)
                    op.mint(DUST, 7, BOB)
                    op.transfer(DUST, 1, ALICE, BOB)  # ALICE holds no DUST

        assert tokens.balance_of(NIGHT, ALICE) == 100
        assert tokens.balance_of(DUST, BOB) == 7  # the DUST mint could not be undone
        failed = [entry for entry in logs if entry["event"] == "token_operation_compensation_failed"]
        assert len(failed) == 1
        assert failed[0]["kind"] == "mint"
        assert failed[0]["error"] == "RuntimeError"
        assert [entry["event"] for entry in logs].count("token_operation_compensated") == 1

    def test_zero_amounts_not_journaled(self, store, tokens):
        """Zero-amount token operations are skipped."""
        with atomic(store, tokens, "test") as op:
            op.mint(NIGHT, 0, ALICE)
            op.burn(NIGHT, 0, ALICE)
            op.transfer(NIGHT, 0, ALICE, BOB)
            assert op.token_operations == []

    def test_reads_see_staged_writes(self, store, tokens):
        """Reads inside the block see the block's own writes."""
        store.put(b"pair:1", "old")
        with atomic(store, tokens, "test") as op:
            op.put(b"pair:1", "new")
            assert op.get(b"pair:1") == "new"
            assert dict(op.scan(b"pair:")) == {b"pair:1": "new"}
            assert store.get(b"pair:1") == "old"


class TestPairLocks:
    """Tests for per-pair locking."""

    def test_same_pair_same_lock(self):
        """One lock per pair id, created on first use."""
        locks = PairLocks()
        assert locks.lock_for(b"a") is locks.lock_for(b"a")
        assert locks.lock_for(b"a") is not locks.lock_for(b"b")
        assert len(locks) == 2

    def test_reentrant(self):
        """A holder may re-acquire its own pair lock."""
        locks = PairLocks()
        with locks.hold(b"a"):
            with locks.hold(b"a"):
                pass

    def test_serializes_same_pair(self):
        """Holders of the same pair never overlap."""
        locks = PairLocks()
        active = []
        overlaps = []

        def worker():
            for _ in range(200):
                with locks.hold(b"pair"):
                    active.append(1)
                    if len(active) > 1:
                        overlaps.append(1)
                    active.pop()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert overlaps == []
