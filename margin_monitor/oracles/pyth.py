"""Pyth Network price oracle (Hermes REST API)."""
import asyncio
import logging
import math
import ssl

import aiohttp
import certifi

from ..assets import CoinSymbol, Network, PoolKey, get_pyth_feed_id
from ..errors import PriceUnavailableError, UnsupportedAssetError

logger = logging.getLogger(__name__)

LATEST_PRICE_PATH = "/v2/updates/price/latest"


def _normalize_feed_id(feed_id: str) -> str:
    return feed_id.lower().removeprefix("0x")


class PythOracle:
    """Fetch USD prices for the registered coins from Pyth Hermes."""

    def __init__(self, hermes_url: str, network: Network) -> None:
        self.hermes_url = hermes_url.rstrip("/")
        self.network = network
        self.price_feeds: dict[CoinSymbol, str] = {}
        for symbol in CoinSymbol:
            try:
                self.price_feeds[symbol] = _normalize_feed_id(
                    get_pyth_feed_id(network, symbol)
                )
            except UnsupportedAssetError:
                logger.debug("No Pyth feed for %s on %s", symbol.value, network.value)

    async def fetch_prices(
        self, symbols: list[CoinSymbol] | None = None
    ) -> dict[CoinSymbol, float]:
        """Fetch current prices from Pyth Network.

        Args:
            symbols: Optional list of coins to fetch. If None, fetches every
                     coin with a feed on this network.
        """
        prices: dict[CoinSymbol, float] = {}

        feeds = self.price_feeds
        if symbols is not None:
            feeds = {k: v for k, v in self.price_feeds.items() if k in symbols}

        if not feeds:
            return prices

        params = [("ids[]", feed_id) for feed_id in sorted(set(feeds.values()))]
        url = f"{self.hermes_url}{LATEST_PRICE_PATH}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(url, params=params) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from Pyth: HTTP %s", response.status
                        )
                        return prices

                    data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            logger.error("Error fetching prices from Pyth: %s", e)
            return prices

        id_to_symbols: dict[str, list[CoinSymbol]] = {}
        for symbol, feed_id in feeds.items():
            id_to_symbols.setdefault(feed_id, []).append(symbol)

        for item in data.get("parsed", []):
            feed_id = _normalize_feed_id(item.get("id", ""))
            price_data = item.get("price", {})
            price = int(price_data.get("price", 0)) * (10 ** int(price_data.get("expo", 0)))
            for symbol in id_to_symbols.get(feed_id, []):
                prices[symbol] = price

        for symbol, price in sorted(prices.items()):
            logger.debug("Pyth %s: $%.4f", symbol.value, price)
        return prices


def base_price_in_quote(prices: dict[CoinSymbol, float], pool: PoolKey) -> float:
    """Price of the pool's base coin in units of its quote coin."""
    info = pool.info
    base = prices.get(info.base, 0.0)
    quote = prices.get(info.quote, 0.0)
    for symbol, value in ((info.base, base), (info.quote, quote)):
        if not math.isfinite(value) or value <= 0:
            raise PriceUnavailableError(
                f"No usable {symbol.value} price for pool {pool.value}"
            )
    return base / quote
