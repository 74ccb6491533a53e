"""Cooldown gate for corrective actions."""
from __future__ import annotations

import time

DEFAULT_COOLDOWN_MS = 300_000


def now_ms() -> float:
    """Wall-clock time in milliseconds since the epoch."""
    return time.time() * 1000


def should_rebalance(
    last_action_ms: float,
    cooldown_ms: float = DEFAULT_COOLDOWN_MS,
    now: float | None = None,
) -> bool:
    """True iff strictly more than ``cooldown_ms`` has elapsed since the last action.

    The gate is stateless. The caller owns ``last_action_ms`` and must only
    advance it once an action has been confirmed.
    """
    current = now_ms() if now is None else now
    return current - last_action_ms > cooldown_ms
