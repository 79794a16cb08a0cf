"""
领域异常定义

每个异常都带有对应的HTTP状态码，路由层据此转换为HTTPException。
"""

class FairSplitError(Exception):
    """所有业务异常的基类"""
    status_code = 400
    code = "fairsplit_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

class InvalidPrice(FairSplitError):
    """价格无效"""
    code = "invalid_price"

class NoRedistributionTarget(FairSplitError):
    """只有一个物品，无法重新分配价格"""
    code = "no_redistribution_target"

class InvalidGameSetup(FairSplitError):
    """游戏配置无效"""
    code = "invalid_game_setup"

class GameNotFound(FairSplitError):
    """游戏不存在"""
    status_code = 404
    code = "game_not_found"

class ItemNotFound(FairSplitError):
    """物品不存在"""
    status_code = 404
    code = "item_not_found"

class ParticipantNotFound(FairSplitError):
    """参与者不存在"""
    status_code = 404
    code = "participant_not_found"

class GameExpired(FairSplitError):
    """游戏已过期"""
    status_code = 410
    code = "game_expired"

class BudgetInvariantViolation(FairSplitError):
    """物品价格之和与游戏总价不一致"""
    status_code = 500
    code = "budget_invariant_violation"

class ConcurrentUpdate(FairSplitError):
    """游戏已被其他请求修改，请刷新后重试"""
    status_code = 409
    code = "concurrent_update"
