"""Tests for LiquidityEngine.remove_liquidity and the protocol fee."""

import pytest

from lunarswap.errors import (
    InsufficientBalance,
    InsufficientLiquidity,
    InvalidInput,
    PairNotFound,
    SlippageExceeded,
)
from lunarswap.identity import pool_account
from lunarswap.models import PairState
from tests.helpers import ALICE, BOB, DUST, INITIAL_BALANCE, NIGHT, TREASURY, USDC, make_exchange


@pytest.fixture
def seeded(exchange):
    """NIGHT/DUST at (1000, 4000) with 2000 shares held by ALICE."""
    exchange.add_liquidity(NIGHT, DUST, 1000, 4000, 0, 0, ALICE)
    return exchange


class TestRemoveLiquidity:
    """Tests for burning shares."""

    def test_partial_withdrawal(self, seeded):
        """Burning a quarter of the supply pays out a quarter of each reserve."""
        result = seeded.remove_liquidity(NIGHT, DUST, 500, 0, 0, ALICE)

        assert (result.amount_a, result.amount_b) == (250, 1000)
        assert result.liquidity == 500
        assert seeded.reserves(NIGHT, DUST) == (750, 3000)
        assert seeded.lp_total_supply(NIGHT, DUST) == 1500
        assert seeded.tokens.balance_of(seeded.lp_color(NIGHT, DUST), ALICE) == 1500
        assert seeded.tokens.balance_of(NIGHT, ALICE) == INITIAL_BALANCE - 750

    def test_reversed_order(self, seeded):
        """Payouts are reported in caller order."""
        result = seeded.remove_liquidity(DUST, NIGHT, 500, 0, 0, ALICE)
        assert (result.amount_a, result.amount_b) == (1000, 250)
        assert (result.amount0, result.amount1) == (250, 1000)

    def test_full_withdrawal_drains(self, seeded):
        """Burning every share drains the pair but keeps its record."""
        seeded.remove_liquidity(NIGHT, DUST, 2000, 0, 0, ALICE)

        assert seeded.reserves(NIGHT, DUST) == (0, 0)
        assert seeded.lp_total_supply(NIGHT, DUST) == 0
        assert seeded.exists(NIGHT, DUST)
        assert seeded.pair_count() == 1
        assert seeded.pair_state(NIGHT, DUST) is PairState.DRAINED
        pair_id = seeded.pair_id(NIGHT, DUST)
        assert seeded.tokens.balance_of(NIGHT, pool_account(pair_id)) == 0
        assert seeded.tokens.balance_of(NIGHT, ALICE) == INITIAL_BALANCE

    def test_refill_after_drain(self, seeded):
        """A drained pair bootstraps again from the new depositor's ratio."""
        seeded.remove_liquidity(NIGHT, DUST, 2000, 0, 0, ALICE)
        result = seeded.add_liquidity(NIGHT, DUST, 300, 700, 0, 0, BOB)

        assert result.created is False
        assert result.liquidity == 458
        assert seeded.reserves(NIGHT, DUST) == (300, 700)
        assert seeded.pair_count() == 1
        assert seeded.pair_state(NIGHT, DUST) is PairState.ACTIVE

    def test_separate_sender(self, seeded):
        """Shares burn from sender; tokens go to recipient."""
        lp_color = seeded.lp_color(NIGHT, DUST)
        seeded.tokens.transfer(lp_color, 500, ALICE, BOB)

        seeded.remove_liquidity(NIGHT, DUST, 500, 0, 0, "carol", sender=BOB)

        assert seeded.tokens.balance_of(lp_color, BOB) == 0
        assert seeded.tokens.balance_of(NIGHT, "carol") == 250
        assert seeded.tokens.balance_of(DUST, "carol") == 1000


class TestRemoveLiquidityFailures:
    """Tests for rejected withdrawals."""

    def test_more_than_supply(self, seeded):
        """Burning more than the LP supply raises InsufficientLiquidity."""
        with pytest.raises(InsufficientLiquidity):
            seeded.remove_liquidity(NIGHT, DUST, 2001, 0, 0, ALICE)

    def test_slippage(self, seeded):
        """A payout below its minimum raises SlippageExceeded and changes nothing."""
        with pytest.raises(SlippageExceeded):
            seeded.remove_liquidity(NIGHT, DUST, 500, 251, 0, ALICE)
        with pytest.raises(SlippageExceeded):
            seeded.remove_liquidity(DUST, NIGHT, 500, 1001, 0, ALICE)
        assert seeded.reserves(NIGHT, DUST) == (1000, 4000)
        assert seeded.lp_total_supply(NIGHT, DUST) == 2000

    def test_zero_payout(self, seeded):
        """A burn that rounds a payout to zero raises InsufficientLiquidity."""
        with pytest.raises(InsufficientLiquidity):
            seeded.remove_liquidity(NIGHT, DUST, 1, 0, 0, ALICE)

    def test_missing_pair(self, exchange):
        """Withdrawing from an unfunded pair raises PairNotFound."""
        with pytest.raises(PairNotFound):
            exchange.remove_liquidity(NIGHT, USDC, 1, 0, 0, ALICE)

    @pytest.mark.parametrize("liquidity,min_a,min_b", [(0, 0, 0), (-1, 0, 0), (1, -1, 0)])
    def test_rejects_bad_amounts(self, seeded, liquidity, min_a, min_b):
        """Non-positive liquidity or negative minimums raise InvalidInput."""
        with pytest.raises(InvalidInput):
            seeded.remove_liquidity(NIGHT, DUST, liquidity, min_a, min_b, ALICE)

    def test_sender_without_shares(self, seeded):
        """A sender not holding the shares aborts with reserves unchanged."""
        with pytest.raises(InsufficientBalance):
            seeded.remove_liquidity(NIGHT, DUST, 500, 0, 0, BOB)

        assert seeded.reserves(NIGHT, DUST) == (1000, 4000)
        assert seeded.lp_total_supply(NIGHT, DUST) == 2000
        assert seeded.tokens.balance_of(NIGHT, BOB) == INITIAL_BALANCE


class TestRoundTrip:
    """Tests for deposit-then-withdraw."""

    def test_deposit_then_withdraw(self, seeded):
        """Withdrawing freshly minted shares returns the deposit minus rounding."""
        supply_before = seeded.lp_total_supply(NIGHT, DUST)
        deposit = seeded.add_liquidity(NIGHT, DUST, 333, 5000, 0, 0, BOB)
        withdrawal = seeded.remove_liquidity(NIGHT, DUST, deposit.liquidity, 0, 0, BOB)

        assert deposit.amount_a - 1 <= withdrawal.amount_a <= deposit.amount_a
        assert deposit.amount_b - 4 <= withdrawal.amount_b <= deposit.amount_b
        assert seeded.lp_total_supply(NIGHT, DUST) == supply_before


class TestProtocolFee:
    """Tests for the kLast protocol fee."""

    def test_disabled_keeps_k_last_zero(self, seeded):
        """Without a recipient no fee is minted and kLast stays 0."""
        seeded.swap_exact_in(NIGHT, DUST, 100, 0, BOB)
        seeded.remove_liquidity(NIGHT, DUST, 100, 0, 0, ALICE)
        assert seeded.lookup(NIGHT, DUST).k_last == 0

    def test_records_k_last(self):
        """With a recipient, kLast tracks the post-operation reserve product."""
        exchange = make_exchange(protocol_fee_to=TREASURY)
        exchange.add_liquidity(NIGHT, DUST, 1_000_000, 1_000_000, 0, 0, ALICE)
        assert exchange.lookup(NIGHT, DUST).k_last == 10**12

    def test_mints_fee_on_next_liquidity_event(self):
        """Fee growth from swaps is paid to the recipient at the next withdrawal."""
        exchange = make_exchange(protocol_fee_to=TREASURY)
        exchange.add_liquidity(NIGHT, DUST, 1_000_000, 1_000_000, 0, 0, ALICE)
        swap = exchange.swap_exact_in(NIGHT, DUST, 100_000, 0, BOB)
        assert swap.amount_out == 90_661
        lp_color = exchange.lp_color(NIGHT, DUST)
        assert exchange.tokens.balance_of(lp_color, TREASURY) == 0

        exchange.remove_liquidity(NIGHT, DUST, 1000, 0, 0, ALICE)

        assert exchange.tokens.balance_of(lp_color, TREASURY) == 22
        assert exchange.lp_total_supply(NIGHT, DUST) == 1_000_000 + 22 - 1000
        reserve0, reserve1 = exchange.reserves(NIGHT, DUST)
        assert exchange.lookup(NIGHT, DUST).k_last == reserve0 * reserve1
