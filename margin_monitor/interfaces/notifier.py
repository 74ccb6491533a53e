"""Notifier protocol — operator-facing delivery channel."""
from typing import Protocol


class Notifier(Protocol):
    """Channel for verdict alerts and per-cycle position logs.

    Both methods return True only when the channel accepted the message;
    ``AlertActionHandler`` treats that as confirmation of a decision.
    """

    async def send_alert(self, message: str, subject: str = "") -> bool: ...

    async def send_log(self, message: str, silent: bool = True) -> bool: ...
