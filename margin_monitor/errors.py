"""Exception hierarchy for the margin monitor."""
from __future__ import annotations


class MarginMonitorError(Exception):
    """Base class for all margin monitor errors."""


class InvalidSnapshotError(MarginMonitorError, ValueError):
    """A position snapshot holds a negative or non-finite quantity."""


class InvalidThresholdsError(MarginMonitorError, ValueError):
    """Safety thresholds are not ordered ``target > warning > danger > liquidation > 0``."""


class EmptyPortfolioError(MarginMonitorError, ValueError):
    """Portfolio aggregation was asked to summarise zero positions."""


class UnsupportedAssetError(MarginMonitorError, KeyError):
    """Lookup of a network, coin type or pool that is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class PriceUnavailableError(MarginMonitorError):
    """The oracle did not return a usable price for a required asset."""


class SuiRpcError(MarginMonitorError, RuntimeError):
    """Every configured RPC endpoint failed or the node returned an error."""
