"""
出价与共识相关的数据模式
"""

from pydantic import BaseModel, field_serializer
from typing import Optional, List, Dict, Union
from decimal import Decimal
from datetime import datetime
from .game_schemas import GameResponse, ItemResponse

class PricePreview(BaseModel):
    """改价预览请求"""
    price: Union[Decimal, int, float, str]  # 由to_price统一校验

class PriceProposal(BaseModel):
    """改价请求"""
    participant_id: int
    price: Union[Decimal, int, float, str]  # 由to_price统一校验

class BidConfirm(BaseModel):
    """确认出价请求"""
    participant_id: int

class BidResponse(BaseModel):
    """出价信息"""
    id: int
    game_id: int
    item_id: int
    participant_id: int
    price: Decimal
    needs_confirmation: bool
    timestamp: datetime
    
    @field_serializer('timestamp')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return dt.isoformat() + 'Z'
    
    class Config:
        from_attributes = True

class AssignmentInfo(BaseModel):
    """物品分配结果"""
    item_id: int
    participant_id: int
    price: Decimal
    
    class Config:
        from_attributes = True

class ResolutionStatus(BaseModel):
    """共识状态"""
    game_id: int
    status: str
    resolved: bool
    failed_conditions: List[str] = []
    assignments: List[AssignmentInfo] = []

class PricePreviewResponse(BaseModel):
    """预览结果，不会写入任何数据"""
    item_id: int
    prices: Dict[int, Decimal]

class GameState(BaseModel):
    """写操作之后的完整状态：价格表、账本和共识结果"""
    game: GameResponse
    items: List[ItemResponse]
    bids: List[BidResponse]
    resolution: ResolutionStatus
    bid: Optional[BidResponse] = None
