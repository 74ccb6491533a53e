"""Multi-line text summaries for logs and notifications."""
from __future__ import annotations

from .formatting import (
    format_leverage,
    format_percent,
    format_ratio,
    format_usd,
)
from .models import (
    LiquidationPrices,
    PortfolioMetrics,
    PositionSnapshot,
    PriceMoveResult,
    RebalanceAction,
    RebalanceDecision,
    SafetyStatus,
    SafetyVerdict,
)
from .risk.formulas import leverage_from_risk_ratio, ltv_from_risk_ratio

STATUS_SYMBOLS: dict[SafetyStatus, str] = {
    SafetyStatus.SAFE: "✅",
    SafetyStatus.WARNING: "⚠️",
    SafetyStatus.DANGER: "🔶",
    SafetyStatus.CRITICAL: "🚨",
}


def format_verdict_line(verdict: SafetyVerdict) -> str:
    """One status line, plus the top-up amount for any non-safe position."""
    line = f"{STATUS_SYMBOLS[verdict.status]} {verdict.message}"
    if not verdict.is_safe:
        line += f"\n  Need {format_usd(verdict.collateral_needed)} to reach target safety"
    return line


def format_position_summary(
    snapshot: PositionSnapshot,
    price: float,
    base_symbol: str = "SUI",
    quote_symbol: str = "USDC",
) -> str:
    ratio = snapshot.risk_ratio(price)
    return (
        f"Position: {snapshot.manager_key}\n"
        f"  Risk Ratio: {format_ratio(ratio)}\n"
        f"  Leverage: {format_leverage(leverage_from_risk_ratio(ratio))}\n"
        f"  LTV: {format_percent(ltv_from_risk_ratio(ratio))}\n"
        f"  Equity: {format_usd(snapshot.equity(price))}\n"
        f"  Assets: {format_usd(snapshot.total_assets(price))}\n"
        f"  Debts: {format_usd(snapshot.total_debts(price))}\n"
        f"  Base: {snapshot.base_asset:.4f} {base_symbol} "
        f"(debt: {snapshot.base_debt:.4f})\n"
        f"  Quote: {snapshot.quote_asset:.2f} {quote_symbol} "
        f"(debt: {snapshot.quote_debt:.2f})\n"
        f"  Open Orders: {len(snapshot.open_orders)}"
    )


def format_portfolio_summary(metrics: PortfolioMetrics) -> str:
    neutral = "yes" if metrics.is_delta_neutral else "no"
    return (
        f"Portfolio\n"
        f"  Equity: {format_usd(metrics.total_equity)}\n"
        f"  Assets: {format_usd(metrics.total_assets)}\n"
        f"  Debts: {format_usd(metrics.total_debts)}\n"
        f"  Avg Risk Ratio: {format_ratio(metrics.avg_risk_ratio)}\n"
        f"  Equity-Weighted Risk Ratio: {format_ratio(metrics.equity_weighted_risk_ratio)}\n"
        f"  Leverage: {format_leverage(metrics.portfolio_leverage)}\n"
        f"  LTV: {format_percent(metrics.portfolio_ltv)}\n"
        f"  Net Base Exposure: {metrics.net_base_exposure:.4f} "
        f"(delta-neutral: {neutral})"
    )


def format_price_move(change: float, result: PriceMoveResult) -> str:
    return (
        f"{change:+.1%} → price {result.new_price:.4f} · "
        f"RR {format_ratio(result.new_risk_ratio)} · "
        f"equity {format_usd(result.new_equity)} "
        f"({format_usd(result.equity_change)}, "
        f"{format_percent(result.equity_change_percent / 100, digits=2)})"
    )


def format_liquidation_prices(prices: LiquidationPrices) -> str:
    """Describe the liquidation trigger; non-positive solutions are unreachable."""
    if prices.long_liq_price:
        if prices.long_liq_price < 0:
            return "Not liquidatable by a price decline"
        return f"Liquidation below {format_ratio(prices.long_liq_price, digits=4)}"
    if prices.short_liq_price:
        if prices.short_liq_price < 0:
            return "Not liquidatable by a price rise"
        return f"Liquidation above {format_ratio(prices.short_liq_price, digits=4)}"
    return "No directional liquidation price"


def format_decision(decision: RebalanceDecision) -> str:
    verb = (
        "Add collateral"
        if decision.action is RebalanceAction.ADD_COLLATERAL
        else "Withdraw collateral"
    )
    return (
        f"{STATUS_SYMBOLS[decision.verdict.status]} {decision.manager_key}: "
        f"{verb} {format_usd(decision.amount)}\n"
        f"  {decision.verdict.message}"
    )
