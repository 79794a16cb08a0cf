"""
价格精度与容差策略

引擎内部统一使用Decimal，所有取整和比较都经过这里。
"""

from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Any, List
from fairsplit.core.config import settings
from fairsplit.core.exceptions import InvalidPrice

QUANTUM = Decimal(1).scaleb(-settings.PRICE_PLACES)  # 0.01
EPSILON = Decimal(settings.PRICE_EPSILON)
MAX_PRICE = Decimal("99999999.99")  # Numeric(10, 2) 列的上限


def quantize(value: Decimal) -> Decimal:
    """按配置的小数位四舍五入"""
    return value.quantize(QUANTUM, rounding=ROUND_HALF_UP)


def to_price(value: Any) -> Decimal:
    """解析并校验价格输入，超出Numeric(10, 2)范围的价格同样视为无效"""
    if isinstance(value, bool) or value is None:
        raise InvalidPrice(f"价格必须是数字: {value!r}")
    try:
        # float先转字符串，避免二进制误差进入Decimal
        price = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        if not price.is_finite():
            raise InvalidPrice(f"价格必须是有限数字: {value!r}")
        if price < 0:
            raise InvalidPrice(f"价格不能为负数: {value}")
        if price > MAX_PRICE:
            raise InvalidPrice(f"价格不能超过 {MAX_PRICE}: {value}")
        return quantize(price)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidPrice(f"价格必须是数字: {value!r}")


def prices_match(a: Decimal, b: Decimal) -> bool:
    """两个金额是否在容差范围内相等"""
    return abs(Decimal(a) - Decimal(b)) < EPSILON


def split_evenly(total: Decimal, count: int) -> List[Decimal]:
    """把总价平均拆成count份，余下的分摊给前面几份，保证总和精确等于total"""
    if count <= 0:
        raise ValueError("count必须大于0")
    total = quantize(Decimal(total))
    share = (total / count).quantize(QUANTUM, rounding=ROUND_DOWN)
    shares = [share] * count
    remainder = int((total - share * count) / QUANTUM)
    for i in range(remainder):
        shares[i] += QUANTUM
    return shares
