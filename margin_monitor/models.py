"""Data models — all frozen (immutable)."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidSnapshotError, InvalidThresholdsError


def _check_quantities(owner: str, obj: object, names: tuple[str, ...]) -> None:
    for name in names:
        value = getattr(obj, name)
        if not math.isfinite(value):
            raise InvalidSnapshotError(f"{owner}: {name} must be finite, got {value}")
        if value < 0:
            raise InvalidSnapshotError(f"{owner}: {name} must be non-negative, got {value}")


@dataclass(frozen=True)
class OpenOrder:
    """Resting order on the book. Carried for reporting only."""

    order_id: str
    client_order_id: str = ""
    quantity: float = 0.0
    filled_quantity: float = 0.0


@dataclass(frozen=True)
class PositionMetrics:
    """Per-position numbers consumed by the portfolio aggregator."""

    equity: float
    total_assets: float
    total_debts: float
    risk_ratio: float
    base_asset: float
    base_debt: float
    manager_key: str = ""

    def __post_init__(self) -> None:
        _check_quantities(
            f"Metrics '{self.manager_key}'",
            self,
            ("total_assets", "total_debts", "base_asset", "base_debt"),
        )
        if math.isnan(self.risk_ratio) or self.risk_ratio < 0:
            raise InvalidSnapshotError(
                f"Metrics '{self.manager_key}': risk_ratio must be non-negative, "
                f"got {self.risk_ratio}"
            )


@dataclass(frozen=True)
class PositionSnapshot:
    """Collateral and debt of one margin manager at a single polling cycle.

    Quantities are in token units (base = SUI, quote = USDC). All derived
    values take the base price denominated in quote units.
    """

    manager_key: str
    base_asset: float
    quote_asset: float
    base_debt: float
    quote_debt: float
    open_orders: tuple[OpenOrder, ...] = ()

    def __post_init__(self) -> None:
        _check_quantities(
            f"Snapshot '{self.manager_key}'",
            self,
            ("base_asset", "quote_asset", "base_debt", "quote_debt"),
        )

    @property
    def net_base(self) -> float:
        return self.base_asset - self.base_debt

    def total_assets(self, price: float) -> float:
        return self.base_asset * price + self.quote_asset

    def total_debts(self, price: float) -> float:
        return self.base_debt * price + self.quote_debt

    def equity(self, price: float) -> float:
        return self.total_assets(price) - self.total_debts(price)

    def risk_ratio(self, price: float) -> float:
        """Assets over debts; ``inf`` when nothing is owed."""
        debts = self.total_debts(price)
        if debts == 0:
            return math.inf
        return self.total_assets(price) / debts

    def metrics(self, price: float) -> PositionMetrics:
        return PositionMetrics(
            equity=self.equity(price),
            total_assets=self.total_assets(price),
            total_debts=self.total_debts(price),
            risk_ratio=self.risk_ratio(price),
            base_asset=self.base_asset,
            base_debt=self.base_debt,
            manager_key=self.manager_key,
        )


@dataclass(frozen=True)
class SafetyThresholds:
    """Risk-ratio boundaries, highest first."""

    target: float = 2.0
    warning: float = 1.5
    danger: float = 1.2
    liquidation: float = 1.05

    def validate(self) -> None:
        """Raise ``InvalidThresholdsError`` unless strictly ordered and positive."""
        values = (self.target, self.warning, self.danger, self.liquidation)
        if not all(math.isfinite(v) for v in values):
            raise InvalidThresholdsError(f"Thresholds must be finite: {self}")
        if not self.target > self.warning > self.danger > self.liquidation > 0:
            raise InvalidThresholdsError(
                "Thresholds must satisfy target > warning > danger > liquidation > 0, "
                f"got target={self.target}, warning={self.warning}, "
                f"danger={self.danger}, liquidation={self.liquidation}"
            )


class SafetyStatus(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"
    CRITICAL = "critical"


@dataclass(frozen=True)
class SafetyVerdict:
    """Classification of one position against the safety thresholds.

    ``collateral_needed`` is clamped at zero for display. ``raw_collateral_delta``
    is ``target * debts - assets`` exactly as computed, and is ``None`` for a
    safe position.
    """

    status: SafetyStatus
    message: str
    risk_ratio: float
    collateral_needed: float = 0.0
    raw_collateral_delta: float | None = None

    @property
    def is_safe(self) -> bool:
        return self.status is SafetyStatus.SAFE


@dataclass(frozen=True)
class LiquidationPrices:
    """Price at which the position hits the liquidation ratio.

    Only the side matching the net base exposure is computed; the other
    is ``0.0``.
    """

    long_liq_price: float = 0.0
    short_liq_price: float = 0.0


@dataclass(frozen=True)
class BreakEven:
    bid_break_even: float
    ask_break_even: float


@dataclass(frozen=True)
class PortfolioMetrics:
    total_equity: float
    total_assets: float
    total_debts: float
    avg_risk_ratio: float
    equity_weighted_risk_ratio: float
    net_base_exposure: float
    portfolio_leverage: float
    portfolio_ltv: float
    is_delta_neutral: bool


@dataclass(frozen=True)
class PriceMoveResult:
    new_price: float
    new_risk_ratio: float
    new_equity: float
    equity_change: float
    equity_change_percent: float


class RebalanceAction(str, Enum):
    ADD_COLLATERAL = "add_collateral"
    WITHDRAW_COLLATERAL = "withdraw_collateral"


@dataclass(frozen=True)
class RebalanceDecision:
    """Corrective action for the transaction builder. Amount is in quote units."""

    manager_key: str
    action: RebalanceAction
    amount: float
    verdict: SafetyVerdict
