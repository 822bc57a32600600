"""
领取操作的进程内锁
同一活动的领取在进程内串行执行，不同活动互不影响
没有协程持有或等待时锁即被移除，注册表大小只与正在进行的领取数有关
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class ClaimLockRegistry:
    """按活动ID分配 asyncio.Lock，并记录每把锁的持有/等待数"""

    def __init__(self):
        self._locks: Dict[int, asyncio.Lock] = {}
        self._holders: Dict[int, int] = {}

    @asynccontextmanager
    async def lock_for(self, promo_id: int) -> AsyncIterator[None]:
        lock = self._locks.get(promo_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[promo_id] = lock
        self._holders[promo_id] = self._holders.get(promo_id, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._holders[promo_id] -= 1
            if self._holders[promo_id] == 0:
                del self._holders[promo_id]
                del self._locks[promo_id]

    def __len__(self) -> int:
        return len(self._locks)


# 全局锁注册表
claim_locks = ClaimLockRegistry()
