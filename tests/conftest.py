"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from margin_monitor.assets import CoinSymbol, Network, PoolKey
from margin_monitor.config import (
    AppConfig,
    MarginManagerConfig,
    MonitorConfig,
    NotificationsConfig,
    PriceOracleConfig,
    SuiConfig,
    TelegramConfig,
)
from margin_monitor.models import PositionSnapshot, SafetyThresholds

# SUI priced in USDC for the reference scenario.
SCENARIO_PRICE = 560.0


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_thresholds() -> SafetyThresholds:
    return SafetyThresholds(target=2.0, warning=1.5, danger=1.2, liquidation=1.05)


@pytest.fixture()
def sample_snapshot() -> PositionSnapshot:
    """Long 0.1 SUI on borrowed SUI; risk ratio ≈ 3.89 at 560."""
    return PositionSnapshot(
        manager_key="primary",
        base_asset=0.2,
        quote_asset=105.8843,
        base_debt=0.1,
        quote_debt=0.0,
    )


@pytest.fixture()
def critical_snapshot() -> PositionSnapshot:
    """1 SUI against 540 USDC of debt; risk ratio ≈ 1.037 at 560."""
    return PositionSnapshot(
        manager_key="primary",
        base_asset=1.0,
        quote_asset=0.0,
        base_debt=0.0,
        quote_debt=540.0,
    )


@pytest.fixture()
def sample_prices() -> dict[CoinSymbol, float]:
    return {CoinSymbol.SUI: SCENARIO_PRICE, CoinSymbol.USDC: 1.0}


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_manager_config() -> MarginManagerConfig:
    return MarginManagerConfig(
        key="primary",
        address="0xMANAGER1",
        balance_manager="0xBALANCE1",
        pool=PoolKey.SUI_USDC,
    )


@pytest.fixture()
def sample_app_config(
    sample_thresholds: SafetyThresholds,
    sample_manager_config: MarginManagerConfig,
) -> AppConfig:
    return AppConfig(
        network=Network.MAINNET,
        monitor=MonitorConfig(
            check_interval_seconds=30,
            rebalance_cooldown_ms=300_000,
            min_action_amount=1.0,
            withdraw_excess=False,
            thresholds=sample_thresholds,
        ),
        margin_managers=(sample_manager_config,),
        sui=SuiConfig(rpc_endpoints=("https://rpc.example.com",), rpc_timeout=5),
        price_oracle=PriceOracleConfig(hermes_url="https://hermes.example.com"),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    network: mainnet
    monitor:
      check_interval_seconds: 45
      rebalance_cooldown_ms: 120000
      min_action_amount: 5.0
      withdraw_excess: true
      thresholds:
        target: 2.0
        warning: 1.5
        danger: 1.2
        liquidation: 1.05
    margin_managers:
      - key: primary
        address: "0xMANAGER1"
        balance_manager: "0xBALANCE1"
        pool: SUI_USDC
      - key: secondary
        address: "0xMANAGER2"
    sui:
      rpc_endpoints: ["https://rpc.example.com", "https://rpc2.example.com"]
      rpc_timeout: 10
    price_oracle:
      hermes_url: "https://hermes.example.com"
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: 999
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample on-chain data
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_margin_fields() -> dict:
    """Decoded margin manager fields matching ``sample_snapshot``."""
    return {
        "base_asset": "200000000",  # 0.2 SUI (9 decimals)
        "quote_asset": "105884300",  # 105.8843 USDC (6 decimals)
        "base_debt": "100000000",  # 0.1 SUI
        "quote_debt": "0",
    }


@pytest.fixture()
def sample_account_fields() -> dict:
    return {
        "open_orders": {
            "fields": {
                "contents": [
                    "170141183460491367824575755177969832142",
                    "18446762520453625184501197",
                ]
            }
        }
    }
