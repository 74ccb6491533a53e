"""DeepBook margin adapter — reads margin manager balances into snapshots."""
from __future__ import annotations

import logging

from ...config import MarginManagerConfig
from ...errors import InvalidSnapshotError, SuiRpcError
from ...formatting import format_address
from ...interfaces.chain import ChainClient
from ...models import OpenOrder, PositionSnapshot
from . import parser

logger = logging.getLogger(__name__)


class DeepBookMarginAdapter:
    """Fetch DeepBook margin manager state on Sui."""

    def __init__(self, chain_client: ChainClient) -> None:
        self._client = chain_client

    async def _get_open_orders(self, manager: MarginManagerConfig) -> tuple[OpenOrder, ...]:
        """Open orders live in the pool's account table, keyed by balance manager."""
        if not manager.balance_manager:
            return ()
        try:
            result = await self._client.get_dynamic_field_object(
                manager.pool.info.account_table_id,
                "0x2::object::ID",
                manager.balance_manager,
            )
        except SuiRpcError as e:
            # Orders are informational; balances still decide safety.
            logger.warning("Could not fetch open orders for %s: %s", manager.key, e)
            return ()

        account = parser.move_fields(parser.move_fields(result).get("value"))
        return parser.parse_open_orders(account)

    async def fetch_snapshot(self, manager: MarginManagerConfig) -> PositionSnapshot:
        """Read one margin manager's balances.

        Raises:
            SuiRpcError: the manager object could not be read.
            InvalidSnapshotError: the object holds no usable margin state.
        """
        obj = await self._client.get_object(manager.address)
        fields = parser.move_fields(obj)
        if not fields:
            raise InvalidSnapshotError(
                f"Margin manager '{manager.key}' ({format_address(manager.address)}) "
                "returned no content"
            )

        open_orders = await self._get_open_orders(manager)
        snapshot = parser.parse_margin_state(manager.key, fields, manager.pool, open_orders)
        logger.debug(
            "Snapshot %s: base %.6f (debt %.6f) quote %.2f (debt %.2f), %d open orders",
            snapshot.manager_key,
            snapshot.base_asset,
            snapshot.base_debt,
            snapshot.quote_asset,
            snapshot.quote_debt,
            len(snapshot.open_orders),
        )
        return snapshot
