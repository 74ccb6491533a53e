"""Snapshot source — turns on-chain margin manager state into snapshots."""
from typing import Protocol

from ..config import MarginManagerConfig
from ..models import PositionSnapshot


class SnapshotSource(Protocol):
    """Abstract interface for reading one margin manager's balances."""

    async def fetch_snapshot(self, manager: MarginManagerConfig) -> PositionSnapshot: ...
