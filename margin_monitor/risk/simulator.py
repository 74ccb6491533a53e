"""What-if projection of a position under a base price move."""
from __future__ import annotations

import math
from typing import Iterable

from ..models import PositionSnapshot, PriceMoveResult
from .formulas import divide


def simulate_price_move(
    snapshot: PositionSnapshot, current_price: float, price_change: float
) -> PriceMoveResult:
    """Project risk ratio and equity after the base price moves by ``price_change``.

    ``price_change`` is a fraction (``-0.1`` for a 10% drop). When current
    equity is zero, ``equity_change_percent`` is ``±inf`` (``nan`` if equity
    did not change either).
    """
    if not math.isfinite(current_price) or current_price <= 0:
        raise ValueError(f"Price must be finite and positive, got {current_price}")
    if not math.isfinite(price_change):
        raise ValueError(f"Price change must be finite, got {price_change}")
    if price_change < -1:
        raise ValueError(f"Price change {price_change} would make the price negative")

    new_price = current_price * (1 + price_change)
    current_equity = snapshot.equity(current_price)
    new_equity = snapshot.equity(new_price)
    equity_change = new_equity - current_equity

    return PriceMoveResult(
        new_price=new_price,
        new_risk_ratio=snapshot.risk_ratio(new_price),
        new_equity=new_equity,
        equity_change=equity_change,
        equity_change_percent=divide(equity_change, current_equity) * 100,
    )


def stress_test(
    snapshot: PositionSnapshot, current_price: float, price_changes: Iterable[float]
) -> dict[float, PriceMoveResult]:
    return {
        change: simulate_price_move(snapshot, current_price, change)
        for change in price_changes
    }
