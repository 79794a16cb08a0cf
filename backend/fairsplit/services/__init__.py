# 业务逻辑服务包
from .game_service import GameService
from .redistribution import redistribute
from .resolution import evaluate_resolution, is_resolved

__all__ = ["GameService", "redistribute", "evaluate_resolution", "is_resolved"]
