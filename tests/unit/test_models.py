"""Unit tests for data models."""
from __future__ import annotations

import math

import pytest

from margin_monitor.errors import InvalidSnapshotError, InvalidThresholdsError
from margin_monitor.models import (
    OpenOrder,
    PositionSnapshot,
    SafetyStatus,
    SafetyThresholds,
    SafetyVerdict,
)


class TestPositionSnapshot:
    def test_derived_values(self, sample_snapshot: PositionSnapshot) -> None:
        assert sample_snapshot.total_assets(560.0) == pytest.approx(217.8843)
        assert sample_snapshot.total_debts(560.0) == pytest.approx(56.0)
        assert sample_snapshot.equity(560.0) == pytest.approx(161.8843)
        assert sample_snapshot.risk_ratio(560.0) == pytest.approx(3.8908, abs=1e-4)
        assert sample_snapshot.net_base == pytest.approx(0.1)

    def test_no_debt_ratio_is_infinite(self) -> None:
        snapshot = PositionSnapshot("m", 1.0, 10.0, 0.0, 0.0)
        assert snapshot.risk_ratio(3.5) == math.inf

    def test_metrics(self, sample_snapshot: PositionSnapshot) -> None:
        metrics = sample_snapshot.metrics(560.0)
        assert metrics.manager_key == "primary"
        assert metrics.equity == pytest.approx(161.8843)
        assert metrics.base_asset == 0.2
        assert metrics.base_debt == 0.1

    def test_frozen(self, sample_snapshot: PositionSnapshot) -> None:
        with pytest.raises(AttributeError):
            sample_snapshot.base_asset = 5.0  # type: ignore[misc]

    @pytest.mark.parametrize("field", ["base_asset", "quote_asset", "base_debt", "quote_debt"])
    def test_negative_quantity_rejected(self, field: str) -> None:
        kwargs = {"base_asset": 1.0, "quote_asset": 1.0, "base_debt": 0.0, "quote_debt": 0.0}
        kwargs[field] = -0.5
        with pytest.raises(InvalidSnapshotError, match=field):
            PositionSnapshot(manager_key="bad", **kwargs)

    @pytest.mark.parametrize("value", [math.nan, math.inf])
    def test_non_finite_quantity_rejected(self, value: float) -> None:
        with pytest.raises(ValueError, match="finite"):
            PositionSnapshot("bad", value, 0.0, 0.0, 0.0)

    def test_open_orders_default_empty(self) -> None:
        snapshot = PositionSnapshot("m", 1.0, 0.0, 0.0, 0.0)
        assert snapshot.open_orders == ()

    def test_open_orders_carried(self) -> None:
        orders = (OpenOrder(order_id="1"), OpenOrder(order_id="2"))
        snapshot = PositionSnapshot("m", 1.0, 0.0, 0.0, 0.0, open_orders=orders)
        assert len(snapshot.open_orders) == 2


class TestSafetyThresholds:
    def test_defaults_are_valid(self) -> None:
        SafetyThresholds().validate()

    @pytest.mark.parametrize(
        "values",
        [
            (1.5, 2.0, 1.2, 1.05),
            (2.0, 1.5, 1.5, 1.05),
            (2.0, 1.5, 1.2, 1.3),
            (2.0, 1.5, 1.2, 0.0),
            (2.0, 1.5, 1.2, -1.0),
            (math.nan, 1.5, 1.2, 1.05),
        ],
    )
    def test_invalid_orderings(self, values: tuple[float, ...]) -> None:
        with pytest.raises(InvalidThresholdsError):
            SafetyThresholds(*values).validate()


class TestSafetyVerdict:
    def test_is_safe(self) -> None:
        verdict = SafetyVerdict(status=SafetyStatus.SAFE, message="ok", risk_ratio=3.0)
        assert verdict.is_safe
        assert verdict.raw_collateral_delta is None

    def test_status_values(self) -> None:
        assert [s.value for s in SafetyStatus] == ["safe", "warning", "danger", "critical"]
