"""
按游戏串行化写操作

同一游戏的改价、确认和重置依次执行，不同游戏之间互不阻塞。
"""

import asyncio
from typing import Dict


class GameLocks:
    """每个游戏一把asyncio锁"""
    
    def __init__(self):
        self._locks: Dict[int, asyncio.Lock] = {}
    
    def get(self, game_id: int) -> asyncio.Lock:
        lock = self._locks.get(game_id)
        if lock is None:
            lock = self._locks[game_id] = asyncio.Lock()
        return lock
    
    def discard(self, game_id: int) -> None:
        """游戏被删除后释放对应的锁"""
        lock = self._locks.get(game_id)
        if lock is not None and not lock.locked():
            del self._locks[game_id]
    
    def __len__(self):
        return len(self._locks)


# 全局锁注册表
game_locks = GameLocks()
