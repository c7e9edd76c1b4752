"""Cooperative cancellation for waits and supervised processes."""

import asyncio
from typing import Optional

from weaver.errors import OperationCancelled


class CancellationToken:
    """Set-once flag that wakes every waiter when cancelled."""

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, delay: float) -> bool:
        """Sleep for ``delay`` seconds; return True if cancelled meanwhile."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelled(f"Operation cancelled: {self.reason}", {"reason": self.reason})
