# 数据模型包
from .game import Game, GameStatus
from .item import Item
from .participant import Participant
from .bid import Bid

__all__ = ["Game", "GameStatus", "Item", "Participant", "Bid"]
