"""
游戏数据访问层

封装游戏、物品、参与者和出价的读写。这里从不提交事务，
由调用方的服务统一commit或rollback。
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union
from sqlalchemy.orm import Session
from fairsplit.models import Game, Item, Participant, Bid
from fairsplit.core.exceptions import GameNotFound, ItemNotFound, ParticipantNotFound
from fairsplit.core.utils import utcnow


class GameRepository:
    """游戏仓储"""
    
    def __init__(self, db: Session):
        self.db = db
    
    # ---- 游戏 ----
    
    def add_game(self, game: Game) -> Game:
        self.db.add(game)
        self.db.flush()
        return game
    
    def get_game(self, ref: Union[int, str]) -> Game:
        """按数字ID或分享码查找游戏，分享码不会是纯数字"""
        query = self.db.query(Game)
        if isinstance(ref, int) or ref.isdigit():
            game = query.filter(Game.id == int(ref)).first()
        else:
            game = query.filter(Game.unique_id == ref).first()
        if game is None:
            raise GameNotFound(f"游戏 {ref} 不存在")
        return game
    
    def set_game_status(self, game: Game, status: str, last_active: datetime, expires_at: datetime) -> None:
        game.status = status
        game.last_active = last_active
        game.expires_at = expires_at
    
    # ---- 物品 ----
    
    def add_item(self, item: Item) -> Item:
        self.db.add(item)
        return item
    
    def get_items(self, game_id: int) -> List[Item]:
        return self.db.query(Item).filter(Item.game_id == game_id).order_by(Item.id).all()
    
    def get_item(self, game_id: int, item_id: int) -> Item:
        item = self.db.query(Item).filter(Item.id == item_id, Item.game_id == game_id).first()
        if item is None:
            raise ItemNotFound(f"物品 {item_id} 不在游戏 {game_id} 中")
        return item
    
    def set_item_prices(self, game_id: int, price_map: Dict[int, Decimal]) -> None:
        """批量写入物品价格，price_map必须覆盖游戏的全部物品"""
        items = self.get_items(game_id)
        if set(price_map) != {item.id for item in items}:
            raise ItemNotFound(f"价格表与游戏 {game_id} 的物品不一致")
        for item in items:
            item.current_price = price_map[item.id]
        self.db.flush()
    
    # ---- 参与者 ----
    
    def add_participant(self, participant: Participant) -> Participant:
        self.db.add(participant)
        self.db.flush()
        return participant
    
    def get_participants(self, game_id: int) -> List[Participant]:
        return self.db.query(Participant).filter(Participant.game_id == game_id).order_by(Participant.id).all()
    
    def get_participant(self, game_id: int, participant_id: int) -> Participant:
        participant = self.db.query(Participant).filter(
            Participant.id == participant_id,
            Participant.game_id == game_id
        ).first()
        if participant is None:
            raise ParticipantNotFound(f"参与者 {participant_id} 不在游戏 {game_id} 中")
        return participant
    
    # ---- 出价 ----
    
    def get_bids(self, game_id: int) -> List[Bid]:
        return self.db.query(Bid).filter(Bid.game_id == game_id).order_by(Bid.item_id, Bid.participant_id).all()
    
    def get_bid(self, item_id: int, participant_id: int) -> Optional[Bid]:
        return self.db.query(Bid).filter(
            Bid.item_id == item_id,
            Bid.participant_id == participant_id
        ).first()
    
    def upsert_bid(self, game_id: int, item_id: int, participant_id: int, price: Decimal,
                   needs_confirmation: bool, timestamp: Optional[datetime] = None) -> Bid:
        """同一参与者对同一物品只保留一条出价，新出价覆盖旧出价"""
        bid = self.get_bid(item_id, participant_id)
        if bid is None:
            bid = Bid(game_id=game_id, item_id=item_id, participant_id=participant_id)
            self.db.add(bid)
        bid.price = price
        bid.needs_confirmation = needs_confirmation
        bid.timestamp = timestamp or utcnow()
        self.db.flush()
        return bid
    
    def delete_bids(self, game_id: int) -> int:
        return self.db.query(Bid).filter(Bid.game_id == game_id).delete(synchronize_session=False)
    
    # ---- 过期清理 ----
    
    def sweep_expired_games(self, now: datetime) -> List[int]:
        """硬删除所有已过期的游戏及其相关数据，不论状态"""
        expired_ids = [row[0] for row in self.db.query(Game.id).filter(Game.expires_at <= now).all()]
        if not expired_ids:
            return []
        
        # 按外键依赖顺序删除
        self.db.query(Bid).filter(Bid.game_id.in_(expired_ids)).delete(synchronize_session=False)
        self.db.query(Item).filter(Item.game_id.in_(expired_ids)).delete(synchronize_session=False)
        self.db.query(Participant).filter(Participant.game_id.in_(expired_ids)).delete(synchronize_session=False)
        self.db.query(Game).filter(Game.id.in_(expired_ids)).delete(synchronize_session=False)
        return expired_ids
