"""Risk engine — pure computations over position snapshots."""
from .evaluator import evaluate, validate_position_safety
from .formulas import (
    calculate_collateral_needed,
    calculate_liquidation_price,
    calculate_withdrawable_collateral,
    leverage_from_risk_ratio,
    ltv_from_risk_ratio,
    risk_ratio_from_leverage,
)
from .portfolio import aggregate
from .scheduler import DEFAULT_COOLDOWN_MS, should_rebalance
from .simulator import simulate_price_move, stress_test

__all__ = [
    "DEFAULT_COOLDOWN_MS",
    "aggregate",
    "calculate_collateral_needed",
    "calculate_liquidation_price",
    "calculate_withdrawable_collateral",
    "evaluate",
    "leverage_from_risk_ratio",
    "ltv_from_risk_ratio",
    "risk_ratio_from_leverage",
    "should_rebalance",
    "simulate_price_move",
    "stress_test",
    "validate_position_safety",
]
