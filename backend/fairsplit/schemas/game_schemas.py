"""
游戏相关的数据模式
"""

from pydantic import BaseModel, Field, field_serializer
from typing import Optional, List, Union
from decimal import Decimal
from datetime import datetime

class ItemCreate(BaseModel):
    """创建物品的请求模式"""
    title: str = Field(..., min_length=1, max_length=200, description="物品名称")
    image_url: str = Field(default="", max_length=1000, description="物品图片地址")

class ParticipantCreate(BaseModel):
    """加入游戏的请求模式"""
    name: str = Field(..., min_length=1, max_length=100, description="参与者名称")
    email: Optional[str] = Field(default=None, max_length=200)

class GameCreate(BaseModel):
    """创建游戏的请求模式"""
    title: str = Field(..., min_length=1, max_length=200, description="游戏标题")
    total_price: Union[Decimal, int, float, str] = Field(..., description="总预算，由to_price统一校验")
    items: List[ItemCreate] = Field(..., description="待分配的物品")
    creator: Optional[ParticipantCreate] = Field(default=None, description="创建者，会自动加入游戏")

class GameResponse(BaseModel):
    """游戏响应模式"""
    id: int
    unique_id: str
    title: str
    total_price: Decimal
    status: str
    creator_id: Optional[int] = None
    needs_reset: bool
    created_at: datetime
    last_active: datetime
    resolved_at: Optional[datetime] = None
    expires_at: datetime
    
    @field_serializer('created_at', 'last_active', 'resolved_at', 'expires_at')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return dt.isoformat() + 'Z'
    
    class Config:
        from_attributes = True

class ItemResponse(BaseModel):
    """物品信息"""
    id: int
    game_id: int
    title: str
    image_url: str
    current_price: Decimal
    
    class Config:
        from_attributes = True

class ParticipantInfo(BaseModel):
    """参与者信息"""
    id: int
    game_id: int
    name: str
    email: Optional[str] = None
    created_at: datetime
    
    @field_serializer('created_at')
    def serialize_dt(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return dt.isoformat() + 'Z'
    
    class Config:
        from_attributes = True
