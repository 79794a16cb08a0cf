"""
改价、出价确认与共识API路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from fairsplit.core.database import get_db
from fairsplit.core.exceptions import FairSplitError
from fairsplit.services.game_service import GameService
from fairsplit.schemas.bid_schemas import (
    BidConfirm, BidResponse, GameState, PricePreview, PricePreviewResponse, PriceProposal, ResolutionStatus
)
from .errors import to_http_exception

router = APIRouter()

@router.get("/{game_ref}/bids", response_model=List[BidResponse])
async def list_bids(
    game_ref: str,
    db: Session = Depends(get_db)
):
    """获取游戏的全部出价"""
    game_service = GameService(db)
    try:
        return await game_service.list_bids(game_ref)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.post("/{game_ref}/items/{item_id}/preview", response_model=PricePreviewResponse)
async def preview_price(
    game_ref: str,
    item_id: int,
    request: PricePreview,
    db: Session = Depends(get_db)
):
    """预览改价后的价格表（不保存）"""
    game_service = GameService(db)
    try:
        return await game_service.preview_price(game_ref, item_id, request.price)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.post("/{game_ref}/items/{item_id}/propose", response_model=GameState)
async def propose_price(
    game_ref: str,
    item_id: int,
    request: PriceProposal,
    db: Session = Depends(get_db)
):
    """提出新价格并出价"""
    game_service = GameService(db)
    try:
        return await game_service.propose_price(game_ref, item_id, request.participant_id, request.price)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.post("/{game_ref}/items/{item_id}/confirm", response_model=GameState)
async def confirm_bid(
    game_ref: str,
    item_id: int,
    request: BidConfirm,
    db: Session = Depends(get_db)
):
    """按当前价格确认出价"""
    game_service = GameService(db)
    try:
        return await game_service.confirm_bid(game_ref, item_id, request.participant_id)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.post("/{game_ref}/reset", response_model=GameState)
async def reset_game(
    game_ref: str,
    db: Session = Depends(get_db)
):
    """重置价格并清空出价"""
    game_service = GameService(db)
    try:
        return await game_service.reset_game(game_ref)
    except FairSplitError as e:
        raise to_http_exception(e)

@router.get("/{game_ref}/resolution", response_model=ResolutionStatus)
async def get_resolution(
    game_ref: str,
    db: Session = Depends(get_db)
):
    """获取共识状态和分配结果"""
    game_service = GameService(db)
    try:
        return await game_service.get_resolution(game_ref)
    except FairSplitError as e:
        raise to_http_exception(e)
