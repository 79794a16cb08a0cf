"""
API路由模块
"""

from fastapi import APIRouter
from .game_routes import router as game_router
from .bid_routes import router as bid_router

# 创建主路由器
api_router = APIRouter()

# 注册各个功能模块的路由
api_router.include_router(game_router, prefix="/games", tags=["游戏管理"])
api_router.include_router(bid_router, prefix="/games", tags=["出价与共识"])
