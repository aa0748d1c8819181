"""
Per-article write locks for a single process.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict
from uuid import UUID


class ArticleLockRegistry:
    """
    One asyncio.Lock per article id.

    A lock exists only while some task holds or waits for it, so ids that
    never resolve to an article leave nothing behind.
    """

    def __init__(self):
        self._locks: Dict[UUID, asyncio.Lock] = {}
        self._users: Dict[UUID, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, article_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(article_id, asyncio.Lock())
        self._users[article_id] = self._users.get(article_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[article_id] -= 1
            if not self._users[article_id]:
                del self._users[article_id]
                del self._locks[article_id]
