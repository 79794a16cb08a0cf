"""
游戏数据模型
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean
from sqlalchemy.orm import relationship
from fairsplit.core.database import Base
from fairsplit.core.utils import utcnow, generate_unique_id

class GameStatus:
    """游戏状态"""
    ACTIVE = "active"
    RESOLVED = "resolved"
    EXPIRED = "expired"

class Game(Base):
    """分价游戏表"""
    __tablename__ = "games"
    
    id = Column(Integer, primary_key=True, index=True)
    unique_id = Column(String(32), unique=True, index=True, nullable=False, default=generate_unique_id)  # 分享码
    title = Column(String(200), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)  # 总预算，所有物品价格之和
    status = Column(String(20), nullable=False, default=GameStatus.ACTIVE)  # active, resolved, expired
    creator_id = Column(Integer, nullable=True)           # 创建者参与者ID
    needs_reset = Column(Boolean, nullable=False, default=False)  # 校验失败后需要重置
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_active = Column(DateTime, nullable=False, default=utcnow)
    resolved_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=False)
    version = Column(Integer, nullable=False, default=1)  # 每次写操作递增，用于跨进程的乐观锁

    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    # 关系
    items = relationship("Item", back_populates="game", order_by="Item.id")
    participants = relationship("Participant", back_populates="game", order_by="Participant.id")
