"""
出价账本与确认状态机

每个(物品, 参与者)只有一条当前出价。其他人的改价让物品涨到出价上限之上时，
该出价被标记为待确认，只有本人确认（或重新出价、重置游戏）才会清除标记。
"""

import logging
from decimal import Decimal
from typing import Dict, List
from fairsplit.models import Bid, Item
from fairsplit.services.repository import GameRepository
from fairsplit.core.utils import utcnow

logger = logging.getLogger(__name__)


class BidLedger:
    """出价账本"""
    
    def __init__(self, repository: GameRepository):
        self.repository = repository
    
    def place_bid(self, game_id: int, item_id: int, participant_id: int, price: Decimal) -> Bid:
        """记录出价，自己刚出的价视为已确认"""
        bid = self.repository.upsert_bid(game_id, item_id, participant_id, price, needs_confirmation=False)
        logger.info("参与者 %s 对物品 %s 出价 %s", participant_id, item_id, price)
        return bid
    
    def confirm_bid(self, item: Item, participant_id: int) -> Bid:
        """按物品当前价格重新确认出价；没有出价时直接创建"""
        bid = self.repository.get_bid(item.id, participant_id)
        current_price = Decimal(item.current_price)
        if bid is not None and not bid.needs_confirmation and Decimal(bid.price) == current_price:
            # 已是确认状态，只刷新时间戳
            bid.timestamp = utcnow()
            return bid
        bid = self.repository.upsert_bid(item.game_id, item.id, participant_id, current_price, needs_confirmation=False)
        logger.info("参与者 %s 确认物品 %s 的价格 %s", participant_id, item.id, current_price)
        return bid
    
    def flag_raised_items(self, game_id: int, old_prices: Dict[int, Decimal], new_prices: Dict[int, Decimal],
                          initiator_id: int, changed_item_id: int) -> List[Bid]:
        """
        标记因他人改价而被动涨价的物品上的出价

        只处理价格上涨的其他物品，被改价的物品本身不算被动涨价；
        发起人自己的出价不受影响。标记只会被设置，不会在这里被清除。
        """
        raised = {
            item_id for item_id, price in new_prices.items()
            if item_id != changed_item_id and price > old_prices.get(item_id, price)
        }
        flagged = []
        if not raised:
            return flagged
        
        for bid in self.repository.get_bids(game_id):
            if bid.item_id not in raised or bid.participant_id == initiator_id:
                continue
            if new_prices[bid.item_id] > Decimal(bid.price) and not bid.needs_confirmation:
                bid.needs_confirmation = True
                flagged.append(bid)
        
        if flagged:
            self.repository.db.flush()
            logger.info("游戏 %s 有 %d 个出价需要重新确认", game_id, len(flagged))
        return flagged
    
    def clear(self, game_id: int) -> int:
        count = self.repository.delete_bids(game_id)
        logger.info("游戏 %s 已清空 %d 条出价", game_id, count)
        return count
