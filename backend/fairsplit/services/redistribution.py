"""
价格重新分配计算

某个物品改价后，差额平均分摊到其余所有物品上，保证总价不变。
纯函数，不接触数据库。
"""

from decimal import Decimal
from typing import Dict, Hashable, Mapping
from fairsplit.core.pricing import QUANTUM, quantize, to_price
from fairsplit.core.exceptions import InvalidPrice, ItemNotFound, NoRedistributionTarget


def redistribute(prices: Mapping[Hashable, Decimal], changed_item_id: Hashable, new_price) -> Dict[Hashable, Decimal]:
    """
    计算改价后的完整价格表
    
    Args:
        prices: 物品ID -> 当前价格
        changed_item_id: 被改价的物品ID
        new_price: 新价格
        
    Returns:
        物品ID -> 新价格，总和与输入总和精确相等
    """
    new_price = to_price(new_price)
    if changed_item_id not in prices:
        raise ItemNotFound(f"物品 {changed_item_id} 不在本游戏中")
    
    others = sorted(item_id for item_id in prices if item_id != changed_item_id)
    if not others:
        raise NoRedistributionTarget("只有一个物品时无法调整价格")
    
    current = {item_id: quantize(Decimal(price)) for item_id, price in prices.items()}
    diff = new_price - current[changed_item_id]
    per_item_reduction = diff / len(others)
    
    result = {changed_item_id: new_price}
    for item_id in others:
        result[item_id] = quantize(current[item_id] - per_item_reduction)
    
    # 取整误差按分逐个补到其他物品上，保证总价不漂移
    residual = sum(current.values()) - sum(result.values())
    step = QUANTUM if residual > 0 else -QUANTUM
    i = 0
    while residual != 0:
        result[others[i % len(others)]] += step
        residual -= step
        i += 1
    
    negative = [item_id for item_id in others if result[item_id] < 0]
    if negative:
        raise InvalidPrice(f"价格 {new_price} 过高，会使其他物品价格变为负数")
    
    return result
