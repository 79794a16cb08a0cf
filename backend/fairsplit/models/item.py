"""
物品数据模型
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from fairsplit.core.database import Base

class Item(Base):
    """待分配物品表"""
    __tablename__ = "items"
    
    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    image_url = Column(String(1000), nullable=False, default="")
    current_price = Column(Numeric(10, 2), nullable=False)  # 只能通过价格重新分配修改
    
    # 关系
    game = relationship("Game", back_populates="items")
