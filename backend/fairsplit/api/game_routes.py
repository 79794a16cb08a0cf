"""
游戏管理API路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from fairsplit.core.database import get_db
from fairsplit.core.exceptions import FairSplitError
from fairsplit.services.game_service import GameService
from fairsplit.schemas.game_schemas import GameCreate, GameResponse, ItemResponse, ParticipantCreate, ParticipantInfo
from .errors import to_http_exception

router = APIRouter()

@router.post("/", response_model=GameResponse)
async def create_game(
    game_data: GameCreate,
    db: Session = Depends(get_db)
):
    """创建新游戏"""
    game_service = GameService(db)
    try:
        return await game_service.create_game(game_data)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.get("/{game_ref}", response_model=GameResponse)
async def get_game(
    game_ref: str,
    db: Session = Depends(get_db)
):
    """按ID或分享码获取游戏信息"""
    game_service = GameService(db)
    try:
        return await game_service.get_game(game_ref)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.get("/{game_ref}/items", response_model=List[ItemResponse])
async def list_items(
    game_ref: str,
    db: Session = Depends(get_db)
):
    """获取游戏的物品及当前价格"""
    game_service = GameService(db)
    try:
        return await game_service.list_items(game_ref)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.get("/{game_ref}/participants", response_model=List[ParticipantInfo])
async def list_participants(
    game_ref: str,
    db: Session = Depends(get_db)
):
    """获取参与者列表"""
    game_service = GameService(db)
    try:
        return await game_service.list_participants(game_ref)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.post("/{game_ref}/participants", response_model=ParticipantInfo)
async def join_game(
    game_ref: str,
    data: ParticipantCreate,
    db: Session = Depends(get_db)
):
    """加入游戏"""
    game_service = GameService(db)
    try:
        return await game_service.join_game(game_ref, data)
    except FairSplitError as e:
        raise to_http_exception(e)
