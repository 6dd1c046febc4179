"""Tests for liquidity share math and client-side slippage helpers."""

import pytest

from lunarswap.amm.liquidity import (
    AddLiquidityAmounts,
    DepositQuote,
    RemoveLiquidityMinimums,
    accumulate_volume,
    calculate_add_liquidity_amounts,
    calculate_minimum_amount,
    calculate_optimal_amounts,
    calculate_optimal_dependent_amount,
    calculate_remove_liquidity_minimums,
    compute_amount_in_max,
    compute_amount_out_min,
    has_liquidity,
    is_valid_liquidity_amounts,
    protocol_fee_liquidity,
    quote_deposit,
    withdrawal_amounts,
)
from lunarswap.constants import SLIPPAGE_TOLERANCE
from lunarswap.errors import InsufficientLiquidity, InvalidInput, InvalidSlippage
from lunarswap.safe_int import UINT256_MAX


class TestCalculateMinimumAmount:
    """Tests for the shared slippage formula."""

    def test_basic(self):
        """floor(optimal * (10000 - bps) / 10000)."""
        assert calculate_minimum_amount(1000, 50) == 995
        assert calculate_minimum_amount(500, 50) == 497

    def test_bounds(self):
        """0 bps keeps the amount, 10000 bps allows zero."""
        assert calculate_minimum_amount(1000, 0) == 1000
        assert calculate_minimum_amount(1000, 10_000) == 0

    @pytest.mark.parametrize("bps", [-1, 10_001])
    def test_rejects_out_of_range(self, bps):
        """Slippage outside [0, 10000] raises InvalidSlippage."""
        with pytest.raises(InvalidSlippage):
            calculate_minimum_amount(1000, bps)

    def test_presets(self):
        """Slippage presets are basis points."""
        assert SLIPPAGE_TOLERANCE.VERY_LOW == 10
        assert SLIPPAGE_TOLERANCE.LOW == 50
        assert SLIPPAGE_TOLERANCE.MEDIUM == 100
        assert SLIPPAGE_TOLERANCE.HIGH == 500
        assert SLIPPAGE_TOLERANCE.VERY_HIGH == 1000
        assert calculate_minimum_amount(10_000, SLIPPAGE_TOLERANCE.HIGH) == 9_500


class TestSwapBounds:
    """Tests for exact-in / exact-out slippage bounds."""

    def test_amount_out_min(self):
        """Output minimum rounds down."""
        assert compute_amount_out_min(453, 100) == 448

    def test_amount_in_max_rounds_up(self):
        """Input maximum rounds up."""
        assert compute_amount_in_max(1000, 50) == 1005
        assert compute_amount_in_max(999, 50) == 1004

    def test_amount_in_max_rejects_bad_slippage(self):
        """Slippage outside [0, 10000] raises InvalidSlippage."""
        with pytest.raises(InvalidSlippage):
            compute_amount_in_max(1000, 20_000)


class TestOptimalAmounts:
    """Tests for price-matched deposit amounts."""

    def test_dependent_amount(self):
        """floor(amount * reserve_dependent / reserve_independent)."""
        assert calculate_optimal_dependent_amount(1000, 2000, 1000) == 500
        assert calculate_optimal_dependent_amount(1, 4000, 1000) == 0

    def test_dependent_amount_rejects_zero(self):
        """Zero arguments raise InvalidInput."""
        with pytest.raises(InvalidInput):
            calculate_optimal_dependent_amount(0, 2000, 1000)
        with pytest.raises(InvalidInput):
            calculate_optimal_dependent_amount(1000, 0, 1000)

    def test_uses_all_of_a_when_b_fits(self):
        """B matched to all of A fits within B desired."""
        assert calculate_optimal_amounts(500, 3000, 1000, 4000) == (500, 2000)

    def test_uses_all_of_b_otherwise(self):
        """A matched to all of B when A would need too much B."""
        assert calculate_optimal_amounts(1000, 400, 1000, 4000) == (100, 400)

    def test_add_liquidity_amounts(self):
        """Optimal and minimum amounts against an existing pool."""
        result = calculate_add_liquidity_amounts(1000, 1000, 2000, 1000, 50)
        assert result == AddLiquidityAmounts(
            amount_a_optimal=1000, amount_b_optimal=500, amount_a_min=995, amount_b_min=497
        )

    def test_add_liquidity_amounts_new_pair(self):
        """An empty pool takes the desired amounts as-is."""
        result = calculate_add_liquidity_amounts(1000, 3000, 0, 0)
        assert result.amount_a_optimal == 1000
        assert result.amount_b_optimal == 3000
        assert result.amount_a_min == 995
        assert result.amount_b_min == 2985


class TestRemoveLiquidityMinimums:
    """Tests for withdrawal minimums."""

    def test_basic(self):
        """Pro-rata share minus slippage."""
        result = calculate_remove_liquidity_minimums(500, 2000, 1000, 4000, 100)
        assert result == RemoveLiquidityMinimums(amount_a_min=247, amount_b_min=990)

    def test_rejects_excess_liquidity(self):
        """Cannot quote more shares than exist."""
        with pytest.raises(InsufficientLiquidity):
            calculate_remove_liquidity_minimums(2001, 2000, 1000, 4000)

    def test_rejects_empty_pool(self):
        """Zero reserves raise InvalidInput."""
        with pytest.raises(InvalidInput):
            calculate_remove_liquidity_minimums(1, 2000, 0, 4000)


class TestPredicates:
    """Tests for liquidity predicates."""

    def test_has_liquidity(self):
        assert has_liquidity(1, 1) is True
        assert has_liquidity(0, 1) is False
        assert has_liquidity(0, 0) is False

    def test_is_valid_liquidity_amounts(self):
        assert is_valid_liquidity_amounts(1, 1) is True
        assert is_valid_liquidity_amounts(1, 0) is False


class TestShareMath:
    """Tests for engine-side mint, burn and protocol fee share math."""

    def test_bootstrap_mints_geometric_mean(self):
        """First deposit mints floor(sqrt(a * b))."""
        assert quote_deposit(1000, 4000, 0, 0, 0) == DepositQuote(1000, 4000, 2000)
        assert quote_deposit(300, 700, 0, 0, 0).liquidity == 458

    def test_proportional_mint(self):
        """Later deposits mint min of the two pro-rata shares."""
        assert quote_deposit(500, 3000, 1000, 4000, 2000) == DepositQuote(500, 2000, 1000)
        assert quote_deposit(1000, 400, 1000, 4000, 2000) == DepositQuote(100, 400, 200)

    def test_dust_deposit_mints_nothing(self):
        """A deposit too small to match the price mints zero shares."""
        assert quote_deposit(1, 1, 1000, 4000, 2000).liquidity == 0

    def test_withdrawal_amounts(self):
        """Burning shares pays out a pro-rata cut of each reserve."""
        assert withdrawal_amounts(500, 2000, 1000, 4000) == (250, 1000)
        assert withdrawal_amounts(2000, 2000, 1000, 4000) == (1000, 4000)

    def test_protocol_fee_zero_without_k_last(self):
        """No fee is owed before kLast is recorded."""
        assert protocol_fee_liquidity(1_000_000, 1_100_000, 909_339, 0) == 0

    def test_protocol_fee_zero_without_growth(self):
        """No fee is owed when sqrt(k) has not grown."""
        assert protocol_fee_liquidity(1_000_000, 1_000_000, 1_000_000, 10**12) == 0

    def test_protocol_fee_on_growth(self):
        """One sixth of sqrt(k) growth, in shares."""
        # rootK = 1000136, rootKLast = 1000000
        # 1000000 * 136 / (5 * 1000136 + 1000000) = 22.66...
        assert protocol_fee_liquidity(1_000_000, 1_100_000, 909_339, 10**12) == 22


class TestAccumulateVolume:
    """Tests for the volume-weighted price counters."""

    def test_empty_reserves_leave_counters(self):
        """Without a prior price nothing is accumulated."""
        assert accumulate_volume((1, 2, 3, 4), 0, 0, 1000, 2000) == (1, 2, 3, 4)
        assert accumulate_volume((1, 2, 3, 4), 1000, 0, 1000, 2000) == (1, 2, 3, 4)

    def test_weights_by_floored_price(self):
        """Each side's volume is weighted by reserve_other // reserve_self."""
        # token0 priced at 2000 // 1000 = 2, token1 at 1000 // 2000 = 0
        assert accumulate_volume((0, 0, 0, 0), 1000, 2000, 1000, 2000) == (2000, 0, 1000, 2000)
        assert accumulate_volume((2000, 0, 1000, 2000), 2000, 4000, 500, 0) == (3000, 0, 1500, 2000)

    def test_wraps_at_uint256(self):
        """Counters wrap instead of overflowing."""
        result = accumulate_volume((UINT256_MAX, 0, UINT256_MAX, 0), 1, 1, 2, 0)
        assert result == (1, 0, 1, 0)
