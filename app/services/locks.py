import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class GroupLockRegistry:
    """
    One asyncio.Lock per group id.

    Mutations of the same group run one at a time; different groups never
    contend. A lock is dropped once no task holds or waits for it.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, group_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(group_id, asyncio.Lock())
        self._users[group_id] = self._users.get(group_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[group_id] -= 1
            if self._users[group_id] == 0:
                del self._users[group_id]
                del self._locks[group_id]

    def is_locked(self, group_id: str) -> bool:
        lock = self._locks.get(group_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


group_locks = GroupLockRegistry()
