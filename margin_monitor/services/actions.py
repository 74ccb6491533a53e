"""Default consumers of rebalance decisions.

Neither handler builds or signs transactions; a transaction builder can be
plugged into the monitor through the ``ActionHandler`` protocol instead.
"""
from __future__ import annotations

import logging
from typing import Sequence

from ..interfaces.notifier import Notifier
from ..models import RebalanceAction, RebalanceDecision
from ..reports import format_decision

logger = logging.getLogger(__name__)

_SUBJECTS = {
    RebalanceAction.ADD_COLLATERAL: "🚨 Margin top-up required",
    RebalanceAction.WITHDRAW_COLLATERAL: "💰 Excess margin available",
}


class LoggingActionHandler:
    """Record the decision in the log and treat it as handled."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    async def handle(self, decision: RebalanceDecision) -> bool:
        self._log.warning("Rebalance decision: %s", format_decision(decision))
        return True


class AlertActionHandler:
    """Forward the decision to an operator; confirmed once any notifier delivers it."""

    def __init__(self, notifiers: Sequence[Notifier], log: logging.Logger | None = None) -> None:
        self._notifiers = list(notifiers)
        self._log = log or logger

    async def handle(self, decision: RebalanceDecision) -> bool:
        message = format_decision(decision)
        delivered = False
        for notifier in self._notifiers:
            try:
                if await notifier.send_alert(message, subject=_SUBJECTS[decision.action]):
                    delivered = True
            except Exception as e:
                self._log.error("Notifier failed to deliver decision: %s", e)
        if not delivered:
            self._log.warning(
                "Decision for %s was not delivered to any notifier", decision.manager_key
            )
        return delivered
