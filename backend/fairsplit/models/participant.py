"""
参与者数据模型
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from fairsplit.core.database import Base
from fairsplit.core.utils import utcnow

class Participant(Base):
    """参与者表"""
    __tablename__ = "participants"
    
    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(200), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    
    # 关系
    game = relationship("Game", back_populates="participants")
