"""Sui JSON-RPC client with endpoint fallback."""
import asyncio
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import SuiConfig
from ...errors import SuiRpcError

logger = logging.getLogger(__name__)


class SuiClient:
    """Sui RPC client that rotates to the next endpoint on failure.

    Errors are raised as ``SuiRpcError`` once every endpoint has been tried;
    callers decide whether a failed read aborts anything.
    """

    def __init__(self, config: SuiConfig) -> None:
        if not config.rpc_endpoints:
            raise ValueError("At least one Sui RPC endpoint is required")
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0

    async def rpc_call(self, method: str, params: list[Any]) -> dict[str, Any]:
        """Make an RPC call, falling back through the configured endpoints."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
                        if not isinstance(result, dict):
                            raise SuiRpcError(f"Malformed RPC response from {rpc_url}")
                        if "error" in result:
                            raise SuiRpcError(f"RPC error from {rpc_url}: {result['error']}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        # A null result (e.g. unknown object) is reported as empty.
                        return result.get("result") or {}
            except (
                aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError, SuiRpcError
            ) as e:
                last_error = e
                logger.warning("RPC endpoint %s failed on %s: %s", rpc_url, method, e)

        raise SuiRpcError(f"All RPC endpoints failed for {method}. Last error: {last_error}")

    async def get_object(self, object_id: str) -> dict[str, Any]:
        """Fetch an object with its type and Move content."""
        result = await self.rpc_call(
            "sui_getObject",
            [object_id, {"showType": True, "showContent": True, "showOwner": True}],
        ) or {}
        if "error" in result:
            raise SuiRpcError(f"Object {object_id} unavailable: {result['error']}")
        return result.get("data") or {}

    async def get_dynamic_field_object(
        self, parent_id: str, key_type: str, key_value: str
    ) -> dict[str, Any]:
        """Fetch a single dynamic field of ``parent_id`` by typed key."""
        result = await self.rpc_call(
            "suix_getDynamicFieldObject",
            [parent_id, {"type": key_type, "value": key_value}],
        ) or {}
        return result.get("data") or {}
