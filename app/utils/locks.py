"""키별 비동기 락 — Per-key asyncio locks.

Serializes read-then-write sequences on the same key (e.g. one employee at
one branch) inside a single process while different keys run in parallel.
Cross-process exclusion is the database's job (row locks, unique indexes).

Usage:
    async with shift_locks.hold((branch_id, employee_id)):
        ...
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLock:
    """키별 비동기 락 — One asyncio.Lock per key, dropped once no task holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._waiters: dict[Hashable, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        self._waiters[key] += 1
        lock = self._locks[key]
        try:
            async with lock:
                yield
        finally:
            # 대기자가 없으면 락 제거 — drop idle locks so the map does not grow forever
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]


shift_locks: KeyedLock = KeyedLock()
