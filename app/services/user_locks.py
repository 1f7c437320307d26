"""
In-process locks serializing history writes of one user.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List


# user_id -> [lock, number of holders and waiters]
_locks: Dict[str, List] = {}


@asynccontextmanager
async def user_lock(user_id: str) -> AsyncIterator[None]:
    """
    Hold the lock of `user_id` for the duration of the block.

    The entry is dropped once nobody holds or waits for it, so the
    registry only grows with concurrently active users.
    """
    entry = _locks.get(user_id)
    if entry is None:
        entry = [asyncio.Lock(), 0]
        _locks[user_id] = entry
    entry[1] += 1

    try:
        async with entry[0]:
            yield
    finally:
        entry[1] -= 1
        if entry[1] == 0 and _locks.get(user_id) is entry:
            _locks.pop(user_id, None)


def active_lock_count() -> int:
    return len(_locks)
