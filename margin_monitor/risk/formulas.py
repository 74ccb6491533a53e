"""Pure risk formulas for margin positions — no I/O, no state.

Degenerate inputs do not raise: a zero denominator yields a signed
infinity (``nan`` for ``0/0``) and callers must special-case it when
formatting or comparing.
"""
from __future__ import annotations

import math

from ..models import BreakEven, LiquidationPrices


def divide(numerator: float, denominator: float) -> float:
    """Divide, mapping a zero denominator to ``±inf`` (``nan`` for ``0/0``)."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def risk_ratio(total_assets: float, total_debts: float) -> float:
    """Total assets over total debts; ``inf`` when nothing is owed."""
    if total_debts == 0:
        return math.inf
    return total_assets / total_debts


def leverage_from_risk_ratio(risk_ratio: float) -> float:
    """Leverage implied by a risk ratio.

    ``leverage = 1 / (1 - 1/r)``; any ratio at or below 1 has no finite
    leverage and returns ``inf``.
    """
    if risk_ratio <= 1:
        return math.inf
    return 1 / (1 - 1 / risk_ratio)


def risk_ratio_from_leverage(leverage: float) -> float:
    """Inverse of :func:`leverage_from_risk_ratio`."""
    if leverage <= 1:
        return math.inf
    return 1 / (1 - 1 / leverage)


def ltv_from_risk_ratio(risk_ratio: float) -> float:
    """Loan-to-value as a fraction: ``1 / r``."""
    if risk_ratio == 0:
        return math.inf
    return 1 / risk_ratio


def calculate_collateral_needed(
    current_assets: float, current_debts: float, target_risk_ratio: float
) -> float:
    """Collateral to add so that ``(assets + x) / debts == target``.

    Negative means the position is already above target; the caller clamps.
    """
    return target_risk_ratio * current_debts - current_assets


def calculate_withdrawable_collateral(
    current_assets: float, current_debts: float, min_risk_ratio: float
) -> float:
    """Largest withdrawal that keeps the ratio at or above ``min_risk_ratio``."""
    return max(0.0, current_assets - min_risk_ratio * current_debts)


def calculate_liquidation_price(
    base_asset: float,
    quote_asset: float,
    base_debt: float,
    quote_debt: float,
    liquidation_ratio: float,
    current_price: float,
) -> LiquidationPrices:
    """Solve ``(base_asset*p + quote_asset) / (base_debt*p + quote_debt) == L`` for ``p``.

    A net-long position (more base held than owed) is liquidated on a price
    decline, a net-short one on a rise. With zero net base the price alone
    cannot liquidate the position and both fields stay ``0.0``.

    ``current_price`` is accepted for call-site symmetry with the other
    formulas; the solution does not depend on it.
    """
    net_base = base_asset - base_debt

    if net_base > 0:
        return LiquidationPrices(
            long_liq_price=divide(
                liquidation_ratio * quote_debt - quote_asset,
                base_asset - liquidation_ratio * base_debt,
            )
        )
    if net_base < 0:
        return LiquidationPrices(
            short_liq_price=divide(
                quote_asset - liquidation_ratio * quote_debt,
                liquidation_ratio * base_debt - base_asset,
            )
        )
    return LiquidationPrices()


def calculate_max_position_size(equity: float, target_leverage: float) -> float:
    return equity * target_leverage


def calculate_interest_cost(debt_amount: float, annual_rate: float, days: float) -> float:
    """Simple (non-compounding) interest over ``days``."""
    return debt_amount * (annual_rate / 365) * days


def calculate_break_even(
    entry_price: float, spread: float, interest_rate: float, holding_days: float
) -> BreakEven:
    """Bid/ask prices that cover the spread plus borrow cost for the holding period."""
    interest_cost = (interest_rate / 365) * holding_days
    return BreakEven(
        bid_break_even=entry_price * (1 - spread - interest_cost),
        ask_break_even=entry_price * (1 + spread + interest_cost),
    )


def calculate_risk_adjusted_size(
    base_size: float, risk_ratio: float, target_risk_ratio: float
) -> float:
    """Shrink ``base_size`` proportionally while the ratio is below target."""
    if risk_ratio < target_risk_ratio:
        return base_size * (risk_ratio / target_risk_ratio)
    return base_size


def calculate_optimal_order_sizes(
    equity: float, num_levels: int, target_exposure: float = 0.1
) -> list[float]:
    """Ladder of order sizes, growing 10% per level away from mid.

    Args:
        equity: Position equity in quote units.
        num_levels: Number of price levels; must be at least 1.
        target_exposure: Fraction of equity spread across all levels.
    """
    if num_levels < 1:
        raise ValueError(f"num_levels must be at least 1, got {num_levels}")
    base_size = (equity * target_exposure) / num_levels
    return [base_size * (1 + i * 0.1) for i in range(num_levels)]
