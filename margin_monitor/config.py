"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .assets import Network, PoolKey, get_network_config
from .errors import InvalidThresholdsError, UnsupportedAssetError
from .models import SafetyThresholds
from .risk.scheduler import DEFAULT_COOLDOWN_MS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonitorConfig:
    check_interval_seconds: int = 60
    rebalance_cooldown_ms: int = DEFAULT_COOLDOWN_MS
    # Decisions below this amount (quote units) are ignored.
    min_action_amount: float = 1.0
    withdraw_excess: bool = False
    thresholds: SafetyThresholds = field(default_factory=SafetyThresholds)


@dataclass(frozen=True)
class MarginManagerConfig:
    key: str = ""
    address: str = ""
    balance_manager: str = ""
    pool: PoolKey = PoolKey.SUI_USDC


@dataclass(frozen=True)
class SuiConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30


@dataclass(frozen=True)
class PriceOracleConfig:
    hermes_url: str = ""


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    network: Network = Network.MAINNET
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    margin_managers: tuple[MarginManagerConfig, ...] = ()
    sui: SuiConfig = field(default_factory=SuiConfig)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_thresholds(raw: dict[str, Any]) -> SafetyThresholds:
    defaults = SafetyThresholds()
    return SafetyThresholds(
        target=float(raw.get("target", defaults.target)),
        warning=float(raw.get("warning", defaults.warning)),
        danger=float(raw.get("danger", defaults.danger)),
        liquidation=float(raw.get("liquidation", defaults.liquidation)),
    )


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        check_interval_seconds=int(raw.get("check_interval_seconds", 60)),
        rebalance_cooldown_ms=int(raw.get("rebalance_cooldown_ms", DEFAULT_COOLDOWN_MS)),
        min_action_amount=float(raw.get("min_action_amount", 1.0)),
        withdraw_excess=bool(raw.get("withdraw_excess", False)),
        thresholds=_build_thresholds(raw.get("thresholds", {})),
    )


def _build_margin_managers(raw: list[dict[str, Any]]) -> tuple[MarginManagerConfig, ...]:
    return tuple(
        MarginManagerConfig(
            key=m.get("key", ""),
            address=m.get("address", ""),
            balance_manager=m.get("balance_manager", ""),
            pool=PoolKey.parse(m.get("pool", PoolKey.SUI_USDC.value)),
        )
        for m in raw
    )


def _build_sui(raw: dict[str, Any], network: Network) -> SuiConfig:
    default_rpc = f"https://fullnode.{network.value}.sui.io:443"
    return SuiConfig(
        rpc_endpoints=tuple(raw.get("rpc_endpoints") or [default_rpc]),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_price_oracle(raw: dict[str, Any], network: Network) -> PriceOracleConfig:
    return PriceOracleConfig(
        hermes_url=raw.get("hermes_url")
        or get_network_config(network).price_service_endpoint,
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    try:
        network = Network.parse(raw.get("network", Network.MAINNET.value))
        cfg = AppConfig(
            network=network,
            monitor=_build_monitor(raw.get("monitor", {})),
            margin_managers=_build_margin_managers(raw.get("margin_managers", [])),
            sui=_build_sui(raw.get("sui", {}), network),
            price_oracle=_build_price_oracle(raw.get("price_oracle", {}), network),
            notifications=_build_notifications(raw.get("notifications", {})),
        )
    except UnsupportedAssetError as e:
        raise ValueError(str(e)) from e

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.margin_managers:
        raise ValueError("At least one margin manager must be configured")

    seen: set[str] = set()
    for manager in cfg.margin_managers:
        if not manager.key:
            raise ValueError("Every margin manager needs a key")
        if manager.key in seen:
            raise ValueError(f"Duplicate margin manager key '{manager.key}'")
        seen.add(manager.key)
        if not manager.address:
            raise ValueError(f"Margin manager '{manager.key}' has no address")

    try:
        cfg.monitor.thresholds.validate()
    except InvalidThresholdsError as e:
        raise ValueError(str(e)) from e

    if cfg.monitor.check_interval_seconds <= 0:
        raise ValueError("check_interval_seconds must be positive")
    if cfg.monitor.rebalance_cooldown_ms < 0:
        raise ValueError("rebalance_cooldown_ms must not be negative")
    if cfg.monitor.min_action_amount < 0:
        raise ValueError("min_action_amount must not be negative")
