"""
In-process per-event locks.

One asyncio.Lock per event id, created on first use and discarded when the
last holder or waiter leaves, so the registry only grows with the number of
events currently being booked.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from ticketing.core.errors import AdmissionTimeoutError


class EventLockRegistry:
    def __init__(self) -> None:
        self._locks: Dict[int, asyncio.Lock] = {}
        self._refs: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, event_id: int) -> bool:
        lock = self._locks.get(event_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, event_id: int, timeout: float) -> AsyncIterator[None]:
        """Hold the event's lock, waiting at most `timeout` seconds for it."""
        lock = self._locks.get(event_id)
        if lock is None:
            lock = self._locks[event_id] = asyncio.Lock()
        self._refs[event_id] = self._refs.get(event_id, 0) + 1

        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout)
            except asyncio.TimeoutError:
                raise AdmissionTimeoutError(event_id, timeout) from None
            try:
                yield
            finally:
                lock.release()
        finally:
            self._refs[event_id] -= 1
            if not self._refs[event_id]:
                del self._refs[event_id]
                del self._locks[event_id]
