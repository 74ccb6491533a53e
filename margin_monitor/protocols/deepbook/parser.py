"""Pure parsing of DeepBook margin manager state — no I/O."""
from __future__ import annotations

from typing import Any

from ...assets import PoolKey, get_decimals
from ...errors import InvalidSnapshotError
from ...models import OpenOrder, PositionSnapshot

BALANCE_FIELDS = ("base_asset", "quote_asset", "base_debt", "quote_debt")


def to_decimal_amount(raw: Any, decimals: int) -> float:
    """Convert a raw u64 balance (int or decimal string) to token units.

    Examples:
        ("1500000000", 9) → 1.5
    """
    if isinstance(raw, dict):
        raw = raw.get("fields", {}).get("value", raw.get("value"))
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidSnapshotError(f"Not a raw token amount: {raw!r}") from None
    return value / (10**decimals)


def parse_margin_state(
    manager_key: str,
    fields: dict[str, Any],
    pool: PoolKey,
    open_orders: tuple[OpenOrder, ...] = (),
) -> PositionSnapshot:
    """Build a snapshot from the margin manager's decoded Move fields.

    Base balances use the pool's base coin decimals, quote balances the
    quote coin's.
    """
    missing = [name for name in BALANCE_FIELDS if name not in fields]
    if missing:
        raise InvalidSnapshotError(
            f"Margin manager '{manager_key}' state is missing {', '.join(missing)}"
        )

    info = pool.info
    base_decimals = get_decimals(info.base)
    quote_decimals = get_decimals(info.quote)

    return PositionSnapshot(
        manager_key=manager_key,
        base_asset=to_decimal_amount(fields["base_asset"], base_decimals),
        quote_asset=to_decimal_amount(fields["quote_asset"], quote_decimals),
        base_debt=to_decimal_amount(fields["base_debt"], base_decimals),
        quote_debt=to_decimal_amount(fields["quote_debt"], quote_decimals),
        open_orders=open_orders,
    )


def parse_open_orders(account_fields: dict[str, Any]) -> tuple[OpenOrder, ...]:
    """Extract order ids from a pool account's ``open_orders`` set."""
    open_orders = account_fields.get("open_orders", {})
    if isinstance(open_orders, dict):
        contents = open_orders.get("fields", {}).get("contents", [])
    else:
        contents = open_orders or []
    return tuple(OpenOrder(order_id=str(order_id)) for order_id in contents)


def move_fields(obj: Any) -> dict[str, Any]:
    """``fields`` of a decoded Move value; null or missing levels give ``{}``.

    Accepts an object response (``{"content": {"fields": ...}}``) or a bare
    Move struct (``{"fields": ...}``).
    """
    if not isinstance(obj, dict):
        return {}
    content = obj.get("content") or obj
    if not isinstance(content, dict):
        return {}
    fields = content.get("fields")
    return fields if isinstance(fields, dict) else {}
