"""Price oracle protocol — price feed abstraction."""
from typing import Protocol

from ..assets import CoinSymbol


class PriceOracle(Protocol):
    """Abstract interface for fetching USD asset prices."""

    async def fetch_prices(
        self, symbols: list[CoinSymbol] | None = None
    ) -> dict[CoinSymbol, float]: ...
