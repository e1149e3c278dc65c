"""Keyed Locks - per-record asyncio locks serializing seat and student mutations.

Invariants:
    - One asyncio.Lock per key while at least one caller holds or waits on it
    - hold() acquires keys in sorted order, so two callers sharing keys never deadlock
    - A key's entry is dropped once its last holder/waiter leaves: the table
      only ever contains keys that are in use
    - Locks are process-local; cross-process safety comes from the storage CAS
"""

import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncGenerator


class KeyedLocks:
    """Registry of asyncio locks addressed by string key."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def _checkout(self, key: str) -> asyncio.Lock:
        """Get or create the lock for a key and count the caller as a user."""
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
            self._users[key] = 0
        self._users[key] += 1
        return self._locks[key]

    def _checkin(self, key: str) -> None:
        self._users[key] -= 1
        if self._users[key] == 0:
            del self._users[key]
            del self._locks[key]

    @asynccontextmanager
    async def _hold_one(self, key: str) -> AsyncGenerator[None, None]:
        lock = self._checkout(key)
        try:
            async with lock:
                yield
        finally:
            self._checkin(key)

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncGenerator[None, None]:
        """Hold every given key for the duration of the block."""
        async with AsyncExitStack() as stack:
            for key in sorted(set(keys)):
                await stack.enter_async_context(self._hold_one(key))
            yield
