"""
过期游戏定期清理任务
"""

import asyncio
import logging
from fairsplit.core.config import settings
from fairsplit.core.database import SessionLocal
from fairsplit.core.locks import game_locks
from fairsplit.services.repository import GameRepository
from fairsplit.services.lifecycle_service import LifecycleManager

logger = logging.getLogger(__name__)


def run_sweep(session_factory=SessionLocal) -> int:
    """执行一次清理，返回删除的游戏数量"""
    db = session_factory()
    try:
        deleted = LifecycleManager(GameRepository(db)).sweep_expired_games()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
    for game_id in deleted:
        game_locks.discard(game_id)
    return len(deleted)


async def expiry_sweeper(interval: int = settings.SWEEP_INTERVAL_SECONDS, session_factory=SessionLocal):
    """按固定间隔循环清理，与请求流量无关"""
    logger.info("🧹 过期清理任务已启动，间隔 %s 秒", interval)
    while True:
        try:
            run_sweep(session_factory)
        except Exception:
            logger.exception("过期清理失败，将在下个周期重试")
        await asyncio.sleep(interval)
