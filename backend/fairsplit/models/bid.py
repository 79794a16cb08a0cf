"""
出价数据模型
"""

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from fairsplit.core.database import Base
from fairsplit.core.utils import utcnow

class Bid(Base):
    """出价表：参与者愿意以price拿走某个物品"""
    __tablename__ = "bids"
    __table_args__ = (
        UniqueConstraint("item_id", "participant_id", name="uq_bid_item_participant"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)                     # 出价上限
    needs_confirmation = Column(Boolean, nullable=False, default=False)  # 物品涨价超过出价后需要重新确认
    timestamp = Column(DateTime, nullable=False, default=utcnow)
    
    # 关系
    item = relationship("Item")
    participant = relationship("Participant")
