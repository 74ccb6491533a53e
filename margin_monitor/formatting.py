"""Display helpers for risk numbers.

Risk formulas return ``inf`` or ``nan`` for degenerate positions, so every
formatter here renders those explicitly instead of printing ``inf``.
"""
from __future__ import annotations

import math

INFINITY_SYMBOL = "∞"
UNDEFINED = "n/a"


def _special(value: float) -> str | None:
    if math.isnan(value):
        return UNDEFINED
    if math.isinf(value):
        return INFINITY_SYMBOL if value > 0 else f"-{INFINITY_SYMBOL}"
    return None


def format_ratio(value: float, digits: int = 3) -> str:
    """``3.891`` style; ``∞`` for a debt-free position."""
    return _special(value) or f"{value:.{digits}f}"


def format_leverage(value: float) -> str:
    if math.isnan(value):
        return UNDEFINED
    special = _special(value)
    return f"{special}x" if special else f"{value:.2f}x"


def format_percent(fraction: float, digits: int = 1) -> str:
    """Render a fraction (``0.25``) as a percentage (``25.0%``)."""
    if math.isnan(fraction):
        return UNDEFINED
    special = _special(fraction)
    return f"{special}%" if special else f"{fraction * 100:.{digits}f}%"


def format_usd(value: float) -> str:
    special = _special(value)
    if special:
        return special
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_duration(ms: float) -> str:
    """Human-readable elapsed time: ``1h 5m``, ``2m 3s`` or ``45s``."""
    seconds = int(ms // 1000)
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


def format_address(address: str) -> str:
    if len(address) > 16:
        return f"{address[:10]}...{address[-6:]}"
    return address
