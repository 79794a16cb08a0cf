"""
游戏生命周期与过期管理

active: 每次访问顺延到 last_active + ACTIVE_TTL_HOURS
resolved: 达成共识后固定为 resolved_at + RESOLVED_TTL_HOURS
过期的游戏无论状态都会被定期清理任务硬删除。
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from fairsplit.models import Game, GameStatus
from fairsplit.services.repository import GameRepository
from fairsplit.core.config import settings
from fairsplit.core.exceptions import GameExpired
from fairsplit.core.utils import utcnow

logger = logging.getLogger(__name__)


class LifecycleManager:
    """游戏状态与过期时间管理"""
    
    def __init__(self, repository: GameRepository):
        self.repository = repository
        self.active_ttl = timedelta(hours=settings.ACTIVE_TTL_HOURS)
        self.resolved_ttl = timedelta(hours=settings.RESOLVED_TTL_HOURS)
    
    def initial_expiry(self, now: datetime) -> datetime:
        return now + self.active_ttl
    
    def ensure_not_expired(self, game: Game, now: Optional[datetime] = None) -> None:
        """访问已过期的游戏时抛出GameExpired，而不是普通的不存在"""
        now = now or utcnow()
        if game.status == GameStatus.EXPIRED or game.expires_at <= now:
            if game.status != GameStatus.EXPIRED:
                game.status = GameStatus.EXPIRED
                self.repository.db.commit()
                logger.info("游戏 %s 已过期", game.id)
            raise GameExpired(f"游戏 {game.unique_id} 已过期")
    
    def touch(self, game: Game, now: Optional[datetime] = None) -> None:
        """记录活动，只在active状态下顺延过期时间"""
        if game.status != GameStatus.ACTIVE:
            return
        now = now or utcnow()
        self.repository.set_game_status(game, GameStatus.ACTIVE, now, now + self.active_ttl)
    
    def mark_resolved(self, game: Game, now: Optional[datetime] = None) -> bool:
        """转为已解决状态，重复调用无副作用"""
        if game.status == GameStatus.RESOLVED:
            return False
        now = now or utcnow()
        game.resolved_at = now
        self.repository.set_game_status(game, GameStatus.RESOLVED, now, now + self.resolved_ttl)
        logger.info("🎉 游戏 %s 达成共识", game.id)
        return True
    
    def reopen(self, game: Game, now: Optional[datetime] = None) -> bool:
        """已解决的游戏重新变为active"""
        if game.status != GameStatus.RESOLVED:
            return False
        now = now or utcnow()
        game.resolved_at = None
        self.repository.set_game_status(game, GameStatus.ACTIVE, now, now + self.active_ttl)
        logger.info("游戏 %s 重新开放", game.id)
        return True
    
    def apply_resolution(self, game: Game, resolved: bool, now: Optional[datetime] = None) -> None:
        """根据判定结果切换状态"""
        if resolved:
            self.mark_resolved(game, now)
        else:
            self.reopen(game, now)
    
    def sweep_expired_games(self, now: Optional[datetime] = None) -> List[int]:
        now = now or utcnow()
        deleted = self.repository.sweep_expired_games(now)
        self.repository.db.commit()
        if deleted:
            logger.info("🧹 已清理 %d 个过期游戏: %s", len(deleted), deleted)
        return deleted
