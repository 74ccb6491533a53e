"""Chain client protocol — the Sui object reads a snapshot source needs."""
from typing import Any, Protocol


class ChainClient(Protocol):
    """Read-only Sui access. Implementations raise ``SuiRpcError`` on failure."""

    async def get_object(self, object_id: str) -> dict[str, Any]:
        """Object data including its decoded Move ``content``."""
        ...

    async def get_dynamic_field_object(
        self, parent_id: str, key_type: str, key_value: str
    ) -> dict[str, Any]:
        """Dynamic field of ``parent_id`` stored under a typed key."""
        ...
