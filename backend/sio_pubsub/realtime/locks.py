from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Dict, Hashable


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0
    evicted: bool = False


class RoomOperationLocks:
    """One FIFO lock per connection, serializing its room membership changes.

    Entries are created on first use. ``evict`` drops an entry once nobody
    holds or waits on it, which keeps the registry bounded by the number of
    live connections.
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, _LockEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    async def acquire(self, key: Hashable) -> Callable[[], None]:
        entry = self._entries.get(key)
        if entry is None:
            entry = _LockEntry()
            self._entries[key] = entry
        entry.users += 1
        try:
            await entry.lock.acquire()
        except asyncio.CancelledError:
            self._forget(key, entry)
            raise

        released = False

        def release() -> None:
            nonlocal released
            if released:
                return
            released = True
            entry.lock.release()
            self._forget(key, entry)

        return release

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        release = await self.acquire(key)
        try:
            yield
        finally:
            release()

    def evict(self, key: Hashable) -> None:
        entry = self._entries.get(key)
        if entry is None:
            return
        if entry.users == 0:
            del self._entries[key]
        else:
            entry.evicted = True

    def _forget(self, key: Hashable, entry: _LockEntry) -> None:
        entry.users -= 1
        if entry.users == 0 and entry.evicted and self._entries.get(key) is entry:
            del self._entries[key]
