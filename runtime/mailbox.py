"""Single-slot handoff between the key decoder and the key consumer."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")


class Mailbox(Generic[T]):
    """A one-item mailbox with blocking put and get.

    put() waits while a previous item is still in the slot, so a producer
    that outruns its consumer stalls instead of queueing. get() waits until
    an item arrives.
    """

    def __init__(self) -> None:
        self._slot: asyncio.Queue[T] = asyncio.Queue(maxsize=1)

    async def put(self, item: T) -> None:
        """Store *item*, waiting until the slot is empty."""
        await self._slot.put(item)

    async def get(self) -> T:
        """Take the stored item, waiting until one is available."""
        return await self._slot.get()

    def full(self) -> bool:
        return self._slot.full()

    def empty(self) -> bool:
        return self._slot.empty()
