"""Polling orchestration — snapshots in, verdicts and decisions out."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence

from ..chains.sui import SuiClient
from ..config import AppConfig, MarginManagerConfig
from ..errors import EmptyPortfolioError
from ..formatting import format_duration
from ..interfaces.action_handler import ActionHandler
from ..interfaces.notifier import Notifier
from ..interfaces.price_oracle import PriceOracle
from ..interfaces.snapshot_source import SnapshotSource
from ..models import (
    PortfolioMetrics,
    PositionSnapshot,
    PriceMoveResult,
    RebalanceAction,
    RebalanceDecision,
    SafetyStatus,
    SafetyVerdict,
)
from ..notifications import TelegramNotifier
from ..oracles import PythOracle, base_price_in_quote
from ..protocols.deepbook import DeepBookMarginAdapter
from ..reports import (
    format_liquidation_prices,
    format_portfolio_summary,
    format_position_summary,
    format_price_move,
    format_verdict_line,
)
from ..risk import (
    aggregate,
    calculate_liquidation_price,
    calculate_withdrawable_collateral,
    evaluate,
    should_rebalance,
    stress_test,
)
from ..risk.scheduler import now_ms
from .actions import AlertActionHandler, LoggingActionHandler

logger = logging.getLogger(__name__)

_ALERT_SUBJECTS = {
    SafetyStatus.WARNING: "⚠️ WARNING: Risk ratio below target",
    SafetyStatus.DANGER: "🔶 DANGER: Risk ratio falling",
    SafetyStatus.CRITICAL: "🚨 CRITICAL: Liquidation risk!",
}


@dataclass(frozen=True)
class ManagerResult:
    """Outcome of one margin manager within a polling cycle."""

    manager_key: str
    price: float = 0.0
    snapshot: PositionSnapshot | None = None
    verdict: SafetyVerdict | None = None
    decision: RebalanceDecision | None = None
    executed: bool = False
    error: str = ""


class Monitor:
    """Evaluates every configured margin manager on each polling cycle.

    The monitor owns the per-manager last-action timestamps used by the
    cooldown gate. A timestamp only moves when the action handler confirms
    the action. Managers are checked one after another, so a manager's
    read-decide-act-record sequence never interleaves with itself.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        source: SnapshotSource | None = None,
        oracle: PriceOracle | None = None,
        notifiers: Sequence[Notifier] | None = None,
        action_handler: ActionHandler | None = None,
        log: logging.Logger | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._config = config
        self._thresholds = config.monitor.thresholds
        self._log = log or logger
        self._clock = clock

        if source is None:
            source = DeepBookMarginAdapter(SuiClient(config.sui))
        self._source = source

        if oracle is None:
            oracle = PythOracle(config.price_oracle.hermes_url, config.network)
        self._oracle = oracle

        if notifiers is None:
            notifiers = []
            if config.notifications.telegram.enabled:
                notifiers.append(TelegramNotifier(config.notifications.telegram))
        self._notifiers: list[Notifier] = list(notifiers)

        if action_handler is None:
            if self._notifiers:
                action_handler = AlertActionHandler(self._notifiers, self._log)
            else:
                action_handler = LoggingActionHandler(self._log)
        self._action_handler = action_handler

        self._last_action_ms: dict[str, float] = {}

    @property
    def last_action_ms(self) -> dict[str, float]:
        return dict(self._last_action_ms)

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _send_log(self, message: str, silent: bool = True) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=silent)
            except Exception as e:
                self._log.error("Notifier send_log failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                self._log.error("Notifier send_alert failed: %s", e)

    # ------------------------------------------------------------------
    # Per-manager steps
    # ------------------------------------------------------------------

    def _decide(
        self, snapshot: PositionSnapshot, price: float, verdict: SafetyVerdict
    ) -> RebalanceDecision | None:
        minimum = self._config.monitor.min_action_amount

        if not verdict.is_safe:
            raw = verdict.raw_collateral_delta
            if raw is None or raw <= 0 or raw < minimum:
                return None
            return RebalanceDecision(
                manager_key=snapshot.manager_key,
                action=RebalanceAction.ADD_COLLATERAL,
                amount=raw,
                verdict=verdict,
            )

        if not self._config.monitor.withdraw_excess:
            return None
        total_debts = snapshot.total_debts(price)
        if total_debts <= 0:
            return None
        amount = calculate_withdrawable_collateral(
            snapshot.total_assets(price), total_debts, self._thresholds.target
        )
        if amount <= 0 or amount < minimum:
            return None
        return RebalanceDecision(
            manager_key=snapshot.manager_key,
            action=RebalanceAction.WITHDRAW_COLLATERAL,
            amount=amount,
            verdict=verdict,
        )

    async def _act(self, decision: RebalanceDecision) -> bool:
        """Hand ``decision`` to the action handler if the cooldown allows it."""
        key = decision.manager_key
        cooldown = self._config.monitor.rebalance_cooldown_ms
        last = self._last_action_ms.get(key)
        now = self._clock()

        if last is not None and not should_rebalance(last, cooldown, now=now):
            self._log.info(
                "%s: %s deferred, cooldown has %s left",
                key,
                decision.action.value,
                format_duration(cooldown - (now - last)),
            )
            return False

        try:
            confirmed = await self._action_handler.handle(decision)
        except Exception as e:
            self._log.error("%s: action handler failed: %s", key, e)
            return False

        if confirmed:
            self._last_action_ms[key] = self._clock()
        return confirmed

    async def _read_manager(
        self, manager: MarginManagerConfig, prices: dict
    ) -> tuple[PositionSnapshot, float]:
        price = base_price_in_quote(prices, manager.pool)
        snapshot = await self._source.fetch_snapshot(manager)
        return snapshot, price

    async def _check_manager(
        self, manager: MarginManagerConfig, prices: dict
    ) -> ManagerResult:
        try:
            snapshot, price = await self._read_manager(manager, prices)
            verdict = evaluate(snapshot, price, self._thresholds)
        except Exception as e:
            self._log.error("%s: evaluation failed: %s", manager.key, e)
            return ManagerResult(manager_key=manager.key, error=str(e) or type(e).__name__)

        liq = calculate_liquidation_price(
            snapshot.base_asset,
            snapshot.quote_asset,
            snapshot.base_debt,
            snapshot.quote_debt,
            self._thresholds.liquidation,
            price,
        )
        self._log.info("%s: %s", manager.key, format_verdict_line(verdict))
        self._log.info("%s: %s", manager.key, format_liquidation_prices(liq))

        await self._send_log(
            f"{format_verdict_line(verdict)}\n"
            f"{format_position_summary(snapshot, price)}\n"
            f"{format_liquidation_prices(liq)}\n\n"
            f"{self._now_str()} UTC"
        )
        if not verdict.is_safe:
            await self._send_alert(
                f"{manager.key}\n{format_verdict_line(verdict)}\n"
                f"{format_liquidation_prices(liq)}",
                subject=_ALERT_SUBJECTS[verdict.status],
            )

        decision = self._decide(snapshot, price, verdict)
        executed = await self._act(decision) if decision else False

        return ManagerResult(
            manager_key=manager.key,
            price=price,
            snapshot=snapshot,
            verdict=verdict,
            decision=decision,
            executed=executed,
        )

    def _portfolio(self, results: Sequence[ManagerResult]) -> PortfolioMetrics | None:
        metrics = [r.snapshot.metrics(r.price) for r in results if r.snapshot is not None]
        try:
            return aggregate(metrics)
        except EmptyPortfolioError:
            return None

    # ------------------------------------------------------------------
    # Core workflows
    # ------------------------------------------------------------------

    async def check_cycle(self) -> list[ManagerResult]:
        """Evaluate every margin manager once and log the portfolio."""
        prices = await self._oracle.fetch_prices()

        results = [
            await self._check_manager(manager, prices)
            for manager in self._config.margin_managers
        ]

        portfolio = self._portfolio(results)
        if portfolio is None:
            self._log.warning("No margin manager could be evaluated this cycle")
        else:
            self._log.info("%s", format_portfolio_summary(portfolio))
        return results

    async def generate_report(self) -> str:
        """Build and send a report covering every manager plus the portfolio."""
        prices = await self._oracle.fetch_prices()

        sections: list[str] = []
        results: list[ManagerResult] = []
        for manager in self._config.margin_managers:
            try:
                snapshot, price = await self._read_manager(manager, prices)
                verdict = evaluate(snapshot, price, self._thresholds)
            except Exception as e:
                self._log.error("%s: report skipped: %s", manager.key, e)
                sections.append(f"{manager.key}: unavailable ({e})")
                continue
            results.append(
                ManagerResult(
                    manager_key=manager.key, price=price, snapshot=snapshot, verdict=verdict
                )
            )
            sections.append(
                f"{format_verdict_line(verdict)}\n{format_position_summary(snapshot, price)}"
            )

        portfolio = self._portfolio(results)
        if portfolio is not None:
            sections.append(format_portfolio_summary(portfolio))

        body = "\n\n".join(sections) if sections else "No margin managers configured."
        report = (
            f"📋 Margin Position Report ({self._config.network.value})\n"
            f"\n"
            f"{body}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

        await self._send_alert(report, subject="📋 Margin Position Report")
        self._log.info("Report generated for %d managers", len(results))
        return report

    async def simulate(
        self, price_changes: Sequence[float]
    ) -> dict[str, dict[float, PriceMoveResult]]:
        """Project every manager under each price change."""
        prices = await self._oracle.fetch_prices()

        projections: dict[str, dict[float, PriceMoveResult]] = {}
        for manager in self._config.margin_managers:
            try:
                snapshot, price = await self._read_manager(manager, prices)
                results = stress_test(snapshot, price, price_changes)
            except Exception as e:
                self._log.error("%s: simulation skipped: %s", manager.key, e)
                continue
            projections[manager.key] = results
            for change, result in results.items():
                self._log.info("%s: %s", manager.key, format_price_move(change, result))
        return projections

    async def run_continuous(self, check_interval_seconds: int | None = None) -> None:
        """Poll forever; a failed cycle is logged and retried after a short pause."""
        interval = check_interval_seconds or self._config.monitor.check_interval_seconds
        self._log.info(
            "Starting continuous monitoring (checking every %d seconds)", interval
        )

        while True:
            try:
                await self.check_cycle()
                await asyncio.sleep(interval)
            except Exception as e:
                self._log.error("Error in monitoring loop: %s", e)
                await asyncio.sleep(min(interval, 60))
