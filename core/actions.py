"""
动作定义与动作生成器

一步动作为以下三种之一:
- EAT: 吃掉整个出牌区
- PLAY: 从手牌或明牌区打出同牌面的一组牌
- LAST_STAND: 按位置翻开一张暗牌
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .cards import Card, group_by_rank
from .player import Player
from .rules import RuleEngine


class MoveType(IntEnum):
    """动作类型"""
    EAT = 0         # 吃牌
    PLAY = 1        # 出牌
    LAST_STAND = 2  # 翻暗牌


@dataclass(frozen=True)
class Move:
    """
    不可变动作表示

    Attributes:
        move_type: 动作类型
        cards: 打出的牌 (PLAY)
        index: 暗牌位置 (LAST_STAND)
    """
    move_type: MoveType
    cards: Tuple[Card, ...] = ()
    index: int = -1

    @classmethod
    def eat(cls) -> 'Move':
        return cls(MoveType.EAT)

    @classmethod
    def play(cls, cards: Sequence[Card]) -> 'Move':
        return cls(MoveType.PLAY, cards=tuple(cards))

    @classmethod
    def last_stand(cls, index: int) -> 'Move':
        return cls(MoveType.LAST_STAND, index=index)

    @property
    def is_eat(self) -> bool:
        return self.move_type == MoveType.EAT

    def __len__(self) -> int:
        return len(self.cards)


class MoveGenerator:
    """
    合法动作生成器

    根据玩家当前出牌来源和顶牌生成所有合法动作
    """

    def __init__(self, player: Player, target: Optional[Card], partial: bool = True):
        """
        Args:
            player: 行动玩家
            target: 出牌区顶牌
            partial: 是否允许只打出同牌面中的一部分 (前缀子集)
        """
        self.player = player
        self.target = target
        self.partial = partial
        self.groups = group_by_rank(player.active_pile) if not player.is_blind else {}

    def gen_plays(self) -> List[List[Card]]:
        """
        生成所有合法出牌组合

        partial=True 时每个牌面的每个前缀都是候选, 否则只有整组
        """
        plays = []
        for group in self.groups.values():
            if self.partial:
                candidates = [group[:i] for i in range(1, len(group) + 1)]
            else:
                candidates = [group]

            for cards in candidates:
                if RuleEngine.is_valid_play(cards, self.target, self.player):
                    plays.append(cards)
        return plays

    def generate_all(self) -> List[Move]:
        """
        生成所有合法动作

        - 暗牌阶段: 每个暗牌位置
        - 否则: 所有合法出牌; 没有合法出牌时只能吃牌
        """
        if self.player.is_blind:
            return [Move.last_stand(i) for i in range(len(self.player.last_stand))]

        moves = [Move.play(cards) for cards in self.gen_plays()]
        if not RuleEngine.player_has_valid_move(self.player, self.target):
            moves.append(Move.eat())
        return moves
