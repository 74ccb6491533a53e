"""Unit tests for the risk formula library — pure functions, no I/O."""
from __future__ import annotations

import math

import pytest

from margin_monitor.risk.formulas import (
    calculate_break_even,
    calculate_collateral_needed,
    calculate_interest_cost,
    calculate_liquidation_price,
    calculate_max_position_size,
    calculate_optimal_order_sizes,
    calculate_risk_adjusted_size,
    calculate_withdrawable_collateral,
    divide,
    leverage_from_risk_ratio,
    ltv_from_risk_ratio,
    risk_ratio,
    risk_ratio_from_leverage,
)

RATIOS_ABOVE_ONE = [1.0001, 1.05, 1.5, 2.0, 3.8908, 10.0, 1000.0]


# ---------------------------------------------------------------------------
# leverage / risk ratio / LTV
# ---------------------------------------------------------------------------


class TestLeverage:
    def test_ratio_of_two_is_double_leverage(self) -> None:
        assert leverage_from_risk_ratio(2.0) == pytest.approx(2.0)

    @pytest.mark.parametrize("ratio", [1.0, 0.99, 0.5, 0.0])
    def test_ratio_at_or_below_one_is_infinite(self, ratio: float) -> None:
        assert leverage_from_risk_ratio(ratio) == math.inf

    def test_infinite_ratio_has_no_leverage(self) -> None:
        assert leverage_from_risk_ratio(math.inf) == pytest.approx(1.0)

    @pytest.mark.parametrize("ratio", RATIOS_ABOVE_ONE)
    def test_round_trip(self, ratio: float) -> None:
        assert risk_ratio_from_leverage(leverage_from_risk_ratio(ratio)) == pytest.approx(
            ratio, rel=1e-6
        )

    @pytest.mark.parametrize("leverage", [1.0, 0.5])
    def test_leverage_at_or_below_one_is_infinite_ratio(self, leverage: float) -> None:
        assert risk_ratio_from_leverage(leverage) == math.inf


class TestLtv:
    @pytest.mark.parametrize("ratio", [0.5, 1.0, 1.2, 2.0, 3.8908, 50.0])
    def test_ltv_times_ratio_is_one(self, ratio: float) -> None:
        assert ltv_from_risk_ratio(ratio) * ratio == pytest.approx(1.0)

    def test_debt_free_position_has_zero_ltv(self) -> None:
        assert ltv_from_risk_ratio(math.inf) == 0.0

    def test_zero_ratio_is_infinite(self) -> None:
        assert ltv_from_risk_ratio(0.0) == math.inf


class TestRiskRatio:
    def test_basic(self) -> None:
        assert risk_ratio(300.0, 200.0) == pytest.approx(1.5)

    def test_no_debt_is_infinite(self) -> None:
        assert risk_ratio(300.0, 0.0) == math.inf


class TestDivide:
    def test_regular(self) -> None:
        assert divide(6.0, 3.0) == 2.0

    def test_positive_over_zero(self) -> None:
        assert divide(5.0, 0.0) == math.inf

    def test_negative_over_zero(self) -> None:
        assert divide(-5.0, 0.0) == -math.inf

    def test_zero_over_zero_is_nan(self) -> None:
        assert math.isnan(divide(0.0, 0.0))


# ---------------------------------------------------------------------------
# collateral sizing
# ---------------------------------------------------------------------------


class TestCollateralNeeded:
    def test_below_target(self) -> None:
        assert calculate_collateral_needed(100.0, 60.0, 2.0) == pytest.approx(20.0)

    def test_above_target_is_negative(self) -> None:
        assert calculate_collateral_needed(200.0, 50.0, 2.0) == pytest.approx(-100.0)

    def test_reaching_target(self) -> None:
        needed = calculate_collateral_needed(100.0, 60.0, 2.0)
        assert (100.0 + needed) / 60.0 == pytest.approx(2.0)


class TestWithdrawableCollateral:
    def test_excess(self) -> None:
        assert calculate_withdrawable_collateral(200.0, 50.0, 2.0) == pytest.approx(100.0)

    def test_no_excess_is_zero(self) -> None:
        assert calculate_withdrawable_collateral(100.0, 60.0, 2.0) == 0.0

    def test_ratio_after_withdrawal_is_min_ratio(self) -> None:
        amount = calculate_withdrawable_collateral(500.0, 100.0, 1.5)
        assert (500.0 - amount) / 100.0 == pytest.approx(1.5)

    def test_non_decreasing_in_assets(self) -> None:
        values = [
            calculate_withdrawable_collateral(assets, 100.0, 2.0)
            for assets in (0.0, 100.0, 200.0, 250.0, 1000.0)
        ]
        assert values == sorted(values)
        assert all(v >= 0 for v in values)

    def test_non_increasing_in_debts(self) -> None:
        values = [
            calculate_withdrawable_collateral(500.0, debts, 2.0)
            for debts in (0.0, 50.0, 100.0, 250.0, 1000.0)
        ]
        assert values == sorted(values, reverse=True)
        assert all(v >= 0 for v in values)

    def test_non_increasing_in_min_ratio(self) -> None:
        values = [
            calculate_withdrawable_collateral(500.0, 100.0, ratio)
            for ratio in (1.05, 1.5, 2.0, 5.0, 10.0)
        ]
        assert values == sorted(values, reverse=True)
        assert all(v >= 0 for v in values)


# ---------------------------------------------------------------------------
# liquidation price
# ---------------------------------------------------------------------------


class TestLiquidationPrice:
    def test_long_position(self) -> None:
        result = calculate_liquidation_price(
            base_asset=1.0,
            quote_asset=0.0,
            base_debt=0.0,
            quote_debt=100.0,
            liquidation_ratio=1.0,
            current_price=100.0,
        )
        assert result.long_liq_price == pytest.approx(100.0)
        assert result.short_liq_price == 0

    def test_long_price_hits_liquidation_ratio(self) -> None:
        result = calculate_liquidation_price(2.0, 50.0, 0.5, 400.0, 1.1, 500.0)
        p = result.long_liq_price
        assert (2.0 * p + 50.0) / (0.5 * p + 400.0) == pytest.approx(1.1)
        assert result.short_liq_price == 0

    def test_short_position(self) -> None:
        result = calculate_liquidation_price(
            base_asset=0.0,
            quote_asset=300.0,
            base_debt=1.0,
            quote_debt=0.0,
            liquidation_ratio=1.5,
            current_price=100.0,
        )
        assert result.short_liq_price == pytest.approx(200.0)
        assert result.long_liq_price == 0

    def test_flat_position_has_no_liquidation_price(self) -> None:
        result = calculate_liquidation_price(1.0, 50.0, 1.0, 20.0, 1.05, 500.0)
        assert result.long_liq_price == 0
        assert result.short_liq_price == 0

    def test_zero_denominator_is_infinite(self) -> None:
        # base_asset - L * base_debt == 0 with net base still positive
        result = calculate_liquidation_price(1.05, 0.0, 1.0, 100.0, 1.05, 500.0)
        assert result.long_liq_price == math.inf


# ---------------------------------------------------------------------------
# sizing and cost helpers
# ---------------------------------------------------------------------------


class TestSizingHelpers:
    def test_max_position_size(self) -> None:
        assert calculate_max_position_size(100.0, 3.0) == pytest.approx(300.0)

    def test_interest_cost(self) -> None:
        assert calculate_interest_cost(1000.0, 0.365, 10) == pytest.approx(10.0)

    def test_break_even(self) -> None:
        result = calculate_break_even(100.0, 0.01, 0.365, 10)
        assert result.bid_break_even == pytest.approx(98.0)
        assert result.ask_break_even == pytest.approx(102.0)

    def test_risk_adjusted_size_below_target(self) -> None:
        assert calculate_risk_adjusted_size(10.0, 1.5, 2.0) == pytest.approx(7.5)

    def test_risk_adjusted_size_above_target(self) -> None:
        assert calculate_risk_adjusted_size(10.0, 3.0, 2.0) == 10.0

    def test_optimal_order_sizes(self) -> None:
        sizes = calculate_optimal_order_sizes(1000.0, 3)
        assert sizes == pytest.approx([100 / 3, 100 / 3 * 1.1, 100 / 3 * 1.2])

    def test_optimal_order_sizes_rejects_zero_levels(self) -> None:
        with pytest.raises(ValueError, match="num_levels"):
            calculate_optimal_order_sizes(1000.0, 0)
