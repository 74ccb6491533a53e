"""Action handler — consumer of rebalance decisions."""
from typing import Protocol

from ..models import RebalanceDecision


class ActionHandler(Protocol):
    """Carries out (or forwards) a rebalance decision.

    Returns True only once the action is confirmed; the monitor starts the
    cooldown window from that moment.
    """

    async def handle(self, decision: RebalanceDecision) -> bool: ...
