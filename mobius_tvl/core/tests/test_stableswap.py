"""
Tests for the stable-swap invariant math.
"""

from fractions import Fraction

import pytest

from mobius_tvl.core.stableswap import (
    MIN_INPUT_AMOUNT,
    calculate_swap_price,
    compute_d,
    compute_y,
    estimate_swap_output,
    swap_input_amount,
)
from mobius_tvl.errors import UnresolvablePrice
from mobius_tvl.tests.factories import make_pool, make_registry_entry, make_snapshot

ONE = 10 ** 18


class TestInvariant:

    def test_balanced_d_is_sum(self):
        assert compute_d(100, 1_000 * ONE, 1_000 * ONE) == 2_000 * ONE

    def test_empty_pool_d_is_zero(self):
        assert compute_d(100, 0, 0) == 0

    def test_one_sided_pool_rejected(self):
        with pytest.raises(ValueError):
            compute_d(100, ONE, 0)

    def test_imbalanced_d_below_sum(self):
        d = compute_d(100, 1_500 * ONE, 500 * ONE)
        assert d < 2_000 * ONE
        assert d > 1_900 * ONE

    def test_compute_y_inverts_d(self):
        x, y = 1_200 * ONE, 800 * ONE
        d = compute_d(50, x, y)
        assert abs(compute_y(50, x, d) - y) <= 2


class TestSwapPrice:

    def test_balanced_pool_trades_near_par(self):
        snapshot = make_snapshot(make_pool(0), 1_000_000, 1_000_000)
        rate = calculate_swap_price(snapshot)
        assert isinstance(rate, Fraction)
        assert Fraction(9999, 10000) < rate < 1

    def test_mixed_decimals_are_normalised(self):
        snapshot = make_snapshot(make_pool(0, decimals0=18, decimals1=6), 1_000_000, 1_000_000)
        rate = calculate_swap_price(snapshot)
        assert Fraction(9999, 10000) < rate < 1

    def test_imbalance_moves_price(self):
        pool = make_pool(0)
        balanced = calculate_swap_price(make_snapshot(pool, 1_000_000, 1_000_000))
        token0_heavy = calculate_swap_price(make_snapshot(pool, 4_000_000, 1_000_000))
        token1_heavy = calculate_swap_price(make_snapshot(pool, 1_000_000, 4_000_000))
        assert token0_heavy < balanced < token1_heavy
        assert token1_heavy > 1

    def test_higher_amp_flattens_curve(self):
        pool = make_pool(0)
        low = calculate_swap_price(make_snapshot(pool, 4_000_000, 1_000_000, make_registry_entry(amp=10)))
        high = calculate_swap_price(make_snapshot(pool, 4_000_000, 1_000_000, make_registry_entry(amp=1000)))
        assert low < high < 1

    def test_fees_reduce_rate(self):
        registry = make_registry_entry(trade_fee=40_000_000)  # 0.4%
        snapshot = make_snapshot(make_pool(0), 1_000_000, 1_000_000, registry)
        before = calculate_swap_price(snapshot)
        after = calculate_swap_price(snapshot, include_fees=True)
        assert after == before * (1 - Fraction(40_000_000, 10 ** 10))

    def test_estimate_output_units(self):
        snapshot = make_snapshot(make_pool(0, decimals1=6), 1_000_000, 1_000_000)
        estimate = estimate_swap_output(snapshot, ONE)
        # one whole token in, just under one whole 6-decimal token out
        assert 999_000 < estimate.output_before_fees < 1_000_000
        assert estimate.fee > 0
        assert estimate.output_after_fees < estimate.output_before_fees + 1

    @pytest.mark.parametrize("reserve0,reserve1", [(0, 1_000), (1_000, 0), (0, 0)])
    def test_empty_reserve_is_unresolvable(self, reserve0, reserve1):
        snapshot = make_snapshot(make_pool(0), reserve0, reserve1)
        with pytest.raises(UnresolvablePrice, match="empty reserve"):
            calculate_swap_price(snapshot)

    def test_non_positive_amp_is_unresolvable(self):
        snapshot = make_snapshot(make_pool(0), 1_000, 1_000, make_registry_entry(amp=0))
        with pytest.raises(UnresolvablePrice, match="amplification"):
            calculate_swap_price(snapshot)


class TestSwapInputAmount:

    def test_capped_at_one_token(self):
        snapshot = make_snapshot(make_pool(0), 1_000_000, 1_000_000)
        assert swap_input_amount(snapshot) == ONE

    def test_one_percent_of_small_reserve(self):
        snapshot = make_snapshot(make_pool(0), 50, 50)
        assert swap_input_amount(snapshot) == 50 * ONE // 100

    def test_floor(self):
        snapshot = make_snapshot(make_pool(0, decimals0=0), 5, 5)
        assert swap_input_amount(snapshot) == MIN_INPUT_AMOUNT
