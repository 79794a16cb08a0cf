"""
共识判定

判断当前状态是否构成一个有效的一一分配：每个物品恰好有一个有效出价，
每个参与者恰好拥有一个有效出价，没有待确认出价，且价格总和等于总预算。
只读取传入对象的属性，可以用于ORM对象也可以用于普通对象。
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Sequence
from fairsplit.core.pricing import prices_match


@dataclass
class Assignment:
    item_id: int
    participant_id: int
    price: Decimal


@dataclass
class ResolutionReport:
    """共识判定结果"""
    resolved: bool
    failed_conditions: List[str] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)


def is_valid_interest(bid, item) -> bool:
    """出价未被标记待确认，且出价上限覆盖物品当前价格"""
    return not bid.needs_confirmation and Decimal(bid.price) >= Decimal(item.current_price)


def evaluate_resolution(game, items: Sequence, participants: Sequence, bids: Sequence) -> ResolutionReport:
    failed = []
    
    if len(participants) != len(items):
        failed.append("participant_count_mismatch")
    
    total = sum((Decimal(item.current_price) for item in items), Decimal(0))
    if not prices_match(total, game.total_price):
        failed.append("budget_mismatch")
    
    items_by_id = {item.id: item for item in items}
    interests: Dict[int, list] = {item.id: [] for item in items}
    per_participant: Dict[int, int] = {p.id: 0 for p in participants}
    for bid in bids:
        item = items_by_id.get(bid.item_id)
        if item is None or not is_valid_interest(bid, item):
            continue
        interests[item.id].append(bid)
        if bid.participant_id in per_participant:
            per_participant[bid.participant_id] += 1
    
    if any(len(claims) == 0 for claims in interests.values()):
        failed.append("unclaimed_item")
    if any(len(claims) > 1 for claims in interests.values()):
        failed.append("contested_item")
    if any(bid.needs_confirmation for bid in bids):
        failed.append("pending_confirmation")
    if any(count != 1 for count in per_participant.values()):
        failed.append("participant_without_single_claim")
    
    if failed:
        return ResolutionReport(resolved=False, failed_conditions=failed)
    
    assignments = [
        Assignment(item_id=item_id, participant_id=claims[0].participant_id,
                   price=Decimal(items_by_id[item_id].current_price))
        for item_id, claims in sorted(interests.items())
    ]
    return ResolutionReport(resolved=True, assignments=assignments)


def is_resolved(game, items: Sequence, participants: Sequence, bids: Sequence) -> bool:
    """共识判定"""
    return evaluate_resolution(game, items, participants, bids).resolved
