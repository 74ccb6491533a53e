"""Fleet-level aggregation over several margin positions."""
from __future__ import annotations

import math
from typing import Sequence

from ..errors import EmptyPortfolioError
from ..models import PortfolioMetrics, PositionMetrics
from .formulas import divide

# Absolute tolerance, in base units, for calling the book delta-neutral.
DELTA_NEUTRAL_TOLERANCE = 1.0


def aggregate(positions: Sequence[PositionMetrics]) -> PortfolioMetrics:
    """Combine per-position metrics into portfolio metrics.

    Sums use ``math.fsum`` so the result does not depend on input order.
    Leverage and LTV follow :func:`divide` on a zero denominator.

    Raises:
        EmptyPortfolioError: ``positions`` is empty.
    """
    if not positions:
        raise EmptyPortfolioError("Cannot aggregate an empty portfolio")

    total_equity = math.fsum(p.equity for p in positions)
    total_assets = math.fsum(p.total_assets for p in positions)
    total_debts = math.fsum(p.total_debts for p in positions)
    avg_risk_ratio = math.fsum(p.risk_ratio for p in positions) / len(positions)
    net_base_exposure = math.fsum(p.base_asset - p.base_debt for p in positions)
    weighted = math.fsum(p.risk_ratio * p.equity for p in positions)

    return PortfolioMetrics(
        total_equity=total_equity,
        total_assets=total_assets,
        total_debts=total_debts,
        avg_risk_ratio=avg_risk_ratio,
        equity_weighted_risk_ratio=divide(weighted, total_equity),
        net_base_exposure=net_base_exposure,
        portfolio_leverage=divide(total_assets, total_equity),
        portfolio_ltv=divide(total_debts, total_assets),
        is_delta_neutral=abs(net_base_exposure) < DELTA_NEUTRAL_TOLERANCE,
    )
