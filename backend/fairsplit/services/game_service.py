"""
游戏管理服务

所有写操作都是单个事务：价格计算、物品写入、出价账本更新、
总价校验和共识判定要么全部生效，要么全部回滚。
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import List, Optional, Union
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from fairsplit.models import Game, Item, Participant
from fairsplit.services.repository import GameRepository
from fairsplit.services.ledger_service import BidLedger
from fairsplit.services.lifecycle_service import LifecycleManager
from fairsplit.services.redistribution import redistribute
from fairsplit.services.resolution import ResolutionReport, evaluate_resolution
from fairsplit.schemas.game_schemas import GameCreate, GameResponse, ItemResponse, ParticipantCreate, ParticipantInfo
from fairsplit.schemas.bid_schemas import (
    AssignmentInfo, BidResponse, GameState, PricePreviewResponse, ResolutionStatus
)
from fairsplit.core.config import settings
from fairsplit.core.exceptions import BudgetInvariantViolation, ConcurrentUpdate, InvalidGameSetup
from fairsplit.core.locks import GameLocks, game_locks
from fairsplit.core.pricing import prices_match, split_evenly, to_price
from fairsplit.core.utils import utcnow

logger = logging.getLogger(__name__)

GameRef = Union[int, str]


class GameService:
    """游戏管理服务"""

    def __init__(self, db: Session, locks: GameLocks = game_locks):
        self.db = db
        self.repository = GameRepository(db)
        self.ledger = BidLedger(self.repository)
        self.lifecycle = LifecycleManager(self.repository)
        self.locks = locks

    # ---- 创建与读取 ----

    async def create_game(self, game_data: GameCreate) -> GameResponse:
        """创建新游戏，物品初始价格为总价平均分配"""
        total_price = to_price(game_data.total_price)
        if total_price <= 0:
            raise InvalidGameSetup("总价必须大于0")
        if not game_data.items:
            raise InvalidGameSetup("至少需要一个物品")
        if len(game_data.items) > settings.MAX_ITEMS:
            raise InvalidGameSetup(f"物品数量不能超过 {settings.MAX_ITEMS}")

        now = utcnow()
        with self._transaction():
            game = self.repository.add_game(Game(
                title=game_data.title,
                total_price=total_price,
                version=1,
                created_at=now,
                last_active=now,
                expires_at=self.lifecycle.initial_expiry(now)
            ))
            shares = split_evenly(total_price, len(game_data.items))
            for item_data, share in zip(game_data.items, shares):
                self.repository.add_item(Item(
                    game_id=game.id,
                    title=item_data.title,
                    image_url=item_data.image_url,
                    current_price=share
                ))
            if game_data.creator is not None:
                creator = self.repository.add_participant(Participant(
                    game_id=game.id,
                    name=game_data.creator.name,
                    email=game_data.creator.email,
                    created_at=now
                ))
                game.creator_id = creator.id

        logger.info("已创建游戏 %s (%s)，总价 %s，%d 个物品", game.id, game.unique_id, total_price, len(shares))
        return GameResponse.model_validate(game)

    async def get_game(self, ref: GameRef) -> GameResponse:
        """获取游戏信息，active状态下会顺延过期时间"""
        game = self._read_game(ref)
        return GameResponse.model_validate(game)

    async def list_items(self, ref: GameRef) -> List[ItemResponse]:
        game = self._read_game(ref)
        return [ItemResponse.model_validate(item) for item in self.repository.get_items(game.id)]

    async def list_participants(self, ref: GameRef) -> List[ParticipantInfo]:
        game = self._read_game(ref)
        return [ParticipantInfo.model_validate(p) for p in self.repository.get_participants(game.id)]

    async def list_bids(self, ref: GameRef) -> List[BidResponse]:
        game = self._read_game(ref)
        return [BidResponse.model_validate(bid) for bid in self.repository.get_bids(game.id)]

    async def get_resolution(self, ref: GameRef) -> ResolutionStatus:
        """获取共识判定结果及分配方案"""
        game = self._read_game(ref)
        return self._resolution_status(game, self._evaluate(game))

    async def preview_price(self, ref: GameRef, item_id: int, price) -> PricePreviewResponse:
        """预览改价后的价格表，不写入任何数据"""
        new_price = to_price(price)
        game = self._read_game(ref)
        item = self.repository.get_item(game.id, item_id)
        prices = {i.id: Decimal(i.current_price) for i in self.repository.get_items(game.id)}
        return PricePreviewResponse(item_id=item.id, prices=redistribute(prices, item.id, new_price))

    # ---- 写操作 ----

    async def join_game(self, ref: GameRef, data: ParticipantCreate) -> ParticipantInfo:
        """加入游戏；参与者数量变化后重新判定共识"""
        game = self._load_game(ref)
        async with self.locks.get(game.id):
            self.db.expire_all()
            with self._transaction(game):
                now = utcnow()
                participant = self.repository.add_participant(Participant(
                    game_id=game.id,
                    name=data.name,
                    email=data.email,
                    created_at=now
                ))
                self.lifecycle.touch(game, now)
                self.lifecycle.apply_resolution(game, self._evaluate(game).resolved, now)
        logger.info("参与者 %s (%s) 加入游戏 %s", participant.id, data.name, game.id)
        return ParticipantInfo.model_validate(participant)

    async def propose_price(self, ref: GameRef, item_id: int, participant_id: int, price) -> GameState:
        """
        参与者为某个物品提出新价格

        1. 按平均分摊计算其他物品的新价格
        2. 写入全部物品价格
        3. 记录发起人的出价（视为已确认）
        4. 其他物品涨价后，别人的出价若低于新价格则标记为待确认
        5. 校验总价，重新判定共识并切换游戏状态
        """
        new_price = to_price(price)
        game = self._load_game(ref)
        async with self.locks.get(game.id):
            self.db.expire_all()
            with self._transaction(game):
                now = utcnow()
                item = self.repository.get_item(game.id, item_id)
                self.repository.get_participant(game.id, participant_id)

                old_prices = {i.id: Decimal(i.current_price) for i in self.repository.get_items(game.id)}
                new_prices = redistribute(old_prices, item.id, new_price)
                self.repository.set_item_prices(game.id, new_prices)

                bid = self.ledger.place_bid(game.id, item.id, participant_id, new_price)
                self.ledger.flag_raised_items(game.id, old_prices, new_prices, participant_id, item.id)
                self._verify_budget(game)

                self.lifecycle.touch(game, now)
                report = self._evaluate(game)
                self.lifecycle.apply_resolution(game, report.resolved, now)

        logger.info("参与者 %s 将游戏 %s 的物品 %s 改价为 %s", participant_id, game.id, item_id, new_price)
        return self._state(game, report, bid)

    async def confirm_bid(self, ref: GameRef, item_id: int, participant_id: int) -> GameState:
        """按物品当前价格确认出价"""
        game = self._load_game(ref)
        async with self.locks.get(game.id):
            self.db.expire_all()
            with self._transaction(game):
                now = utcnow()
                item = self.repository.get_item(game.id, item_id)
                self.repository.get_participant(game.id, participant_id)
                bid = self.ledger.confirm_bid(item, participant_id)

                self.lifecycle.touch(game, now)
                report = self._evaluate(game)
                self.lifecycle.apply_resolution(game, report.resolved, now)
        return self._state(game, report, bid)

    async def reset_game(self, ref: GameRef) -> GameState:
        """重置游戏：物品价格恢复平均分配，清空所有出价，保留物品和参与者"""
        game = self._load_game(ref)
        async with self.locks.get(game.id):
            self.db.expire_all()
            with self._transaction(game):
                now = utcnow()
                items = self.repository.get_items(game.id)
                shares = split_evenly(Decimal(game.total_price), len(items))
                self.repository.set_item_prices(game.id, {item.id: share for item, share in zip(items, shares)})
                self.ledger.clear(game.id)
                game.needs_reset = False

                self.lifecycle.reopen(game, now)
                self.lifecycle.touch(game, now)
                report = self._evaluate(game)
                self.lifecycle.apply_resolution(game, report.resolved, now)

        logger.info("游戏 %s 已重置", game.id)
        return self._state(game, report)

    # ---- 内部方法 ----

    @contextmanager
    def _transaction(self, game: Optional[Game] = None):
        try:
            yield
            if game is not None:
                game.version += 1
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            logger.warning("⚠️ 游戏已被其他请求修改，本次写入已回滚")
            raise ConcurrentUpdate()
        except BudgetInvariantViolation as e:
            self.db.rollback()
            logger.error("❌ %s", e.message)
            if game is not None:
                self._flag_for_reset(game)
            raise
        except Exception:
            self.db.rollback()
            raise

    def _flag_for_reset(self, game: Game) -> None:
        game.needs_reset = True
        self.db.commit()
        logger.error("游戏 %s 已标记为需要重置", game.id)

    def _load_game(self, ref: GameRef) -> Game:
        game = self.repository.get_game(ref)
        self.lifecycle.ensure_not_expired(game)
        return game

    def _read_game(self, ref: GameRef) -> Game:
        """读取游戏并记录活动"""
        game = self._load_game(ref)
        with self._transaction():
            self.lifecycle.touch(game)
        return game

    def _verify_budget(self, game: Game) -> None:
        total = sum((Decimal(i.current_price) for i in self.repository.get_items(game.id)), Decimal(0))
        if not prices_match(total, Decimal(game.total_price)):
            raise BudgetInvariantViolation(
                f"游戏 {game.id} 物品价格之和 {total} 与总价 {game.total_price} 不一致"
            )

    def _evaluate(self, game: Game) -> ResolutionReport:
        return evaluate_resolution(
            game,
            self.repository.get_items(game.id),
            self.repository.get_participants(game.id),
            self.repository.get_bids(game.id)
        )

    def _resolution_status(self, game: Game, report: ResolutionReport) -> ResolutionStatus:
        return ResolutionStatus(
            game_id=game.id,
            status=game.status,
            resolved=report.resolved,
            failed_conditions=report.failed_conditions,
            assignments=[AssignmentInfo.model_validate(a) for a in report.assignments]
        )

    def _state(self, game: Game, report: ResolutionReport, bid=None) -> GameState:
        return GameState(
            game=GameResponse.model_validate(game),
            items=[ItemResponse.model_validate(i) for i in self.repository.get_items(game.id)],
            bids=[BidResponse.model_validate(b) for b in self.repository.get_bids(game.id)],
            resolution=self._resolution_status(game, report),
            bid=BidResponse.model_validate(bid) if bid is not None else None
        )
