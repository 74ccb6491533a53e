"""Classify a position against the safety thresholds."""
from __future__ import annotations

import math

from ..formatting import format_ratio
from ..models import PositionSnapshot, SafetyStatus, SafetyThresholds, SafetyVerdict
from .formulas import calculate_collateral_needed


def validate_position_safety(
    risk_ratio: float, thresholds: SafetyThresholds
) -> tuple[SafetyStatus, str]:
    """Return the safety tier for ``risk_ratio`` and a human-readable message.

    Boundaries are inclusive and checked top-down, so a ratio exactly on a
    threshold lands in the safer tier.
    """
    shown = format_ratio(risk_ratio)
    if risk_ratio >= thresholds.target:
        return SafetyStatus.SAFE, f"Position is safe at {shown}"
    if risk_ratio >= thresholds.warning:
        return SafetyStatus.WARNING, f"Position in warning zone at {shown}"
    if risk_ratio >= thresholds.danger:
        return SafetyStatus.DANGER, f"Position in danger zone at {shown}"
    return SafetyStatus.CRITICAL, f"Position CRITICAL at {shown} - liquidation imminent!"


def evaluate(
    snapshot: PositionSnapshot, price: float, thresholds: SafetyThresholds
) -> SafetyVerdict:
    """Evaluate one snapshot at ``price``.

    Raises:
        InvalidThresholdsError: thresholds are not strictly ordered.
        ValueError: ``price`` is not a finite positive number.
    """
    thresholds.validate()
    if not math.isfinite(price) or price <= 0:
        raise ValueError(f"Price must be finite and positive, got {price}")

    total_assets = snapshot.total_assets(price)
    total_debts = snapshot.total_debts(price)
    ratio = snapshot.risk_ratio(price)

    status, message = validate_position_safety(ratio, thresholds)
    if status is SafetyStatus.SAFE:
        return SafetyVerdict(status=status, message=message, risk_ratio=ratio)

    raw = calculate_collateral_needed(total_assets, total_debts, thresholds.target)
    return SafetyVerdict(
        status=status,
        message=message,
        risk_ratio=ratio,
        collateral_needed=max(0.0, raw),
        raw_collateral_delta=raw,
    )
