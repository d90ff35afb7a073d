"""
玩家与三级牌堆

每位玩家依次使用三个牌堆出牌:
- 手牌 (hand)
- 明牌区 Last Chance (正面朝上, 无序)
- 暗牌区 Last Stand (背面朝上, 按位置选择)

当前出牌来源由各牌堆是否为空实时推导, 不保存额外状态
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from .cards import Card, sort_cards
from .errors import IllegalPlayError


class PileSource(Enum):
    """出牌来源"""
    HAND = "hand"
    LAST_CHANCE = "last_chance"
    LAST_STAND = "last_stand"


@dataclass(frozen=True)
class Player:
    """
    不可变玩家状态

    Attributes:
        id: 座位号 (0 或 1)
        name: 名字
        hand: 手牌 (始终按牌面值升序)
        last_chance: 明牌区
        last_stand: 暗牌区 (位置有意义)
        is_ai: 是否为 AI
        cards_eaten: 累计吃牌数
    """
    id: int
    name: str
    hand: Tuple[Card, ...] = ()
    last_chance: Tuple[Card, ...] = ()
    last_stand: Tuple[Card, ...] = ()
    is_ai: bool = False
    cards_eaten: int = 0

    @property
    def active_source(self) -> PileSource:
        """当前出牌来源: 手牌 > 明牌区 > 暗牌区"""
        if self.hand:
            return PileSource.HAND
        if self.last_chance:
            return PileSource.LAST_CHANCE
        return PileSource.LAST_STAND

    @property
    def active_pile(self) -> Tuple[Card, ...]:
        return self.pile(self.active_source)

    @property
    def is_blind(self) -> bool:
        """是否进入暗牌阶段 (手牌与明牌区均已出完)"""
        return not self.hand and not self.last_chance

    @property
    def is_out(self) -> bool:
        """三个牌堆均为空"""
        return not self.hand and not self.last_chance and not self.last_stand

    @property
    def total_cards(self) -> int:
        return len(self.hand) + len(self.last_chance) + len(self.last_stand)

    def pile(self, source: PileSource) -> Tuple[Card, ...]:
        if source == PileSource.HAND:
            return self.hand
        if source == PileSource.LAST_CHANCE:
            return self.last_chance
        return self.last_stand

    def source_of(self, cards: Iterable[Card]) -> PileSource:
        """
        判断一组牌的来源牌堆

        任意一张在手牌中即视为手牌, 其次明牌区, 否则视为暗牌区
        """
        cards = list(cards)
        if any(c in self.hand for c in cards):
            return PileSource.HAND
        if any(c in self.last_chance for c in cards):
            return PileSource.LAST_CHANCE
        return PileSource.LAST_STAND

    def holds(self, cards: Sequence[Card], source: Optional[PileSource] = None) -> bool:
        """检查这些牌是否都在指定牌堆中 (默认当前来源)"""
        pile = self.pile(source or self.active_source)
        return len(set(cards)) == len(cards) and all(c in pile for c in cards)

    def without(self, cards: Iterable[Card]) -> 'Player':
        """从手牌和明牌区中移除这些牌"""
        removed = set(cards)
        return replace(
            self,
            hand=tuple(c for c in self.hand if c not in removed),
            last_chance=tuple(c for c in self.last_chance if c not in removed),
        )

    def without_last_stand(self, index: int) -> 'Player':
        """按位置移除暗牌"""
        stand = list(self.last_stand)
        del stand[index]
        return replace(self, last_stand=tuple(stand))

    def with_hand_added(self, cards: Iterable[Card], eaten: int = 0) -> 'Player':
        """加入手牌并重新排序"""
        return replace(
            self,
            hand=sort_cards(self.hand + tuple(cards)),
            cards_eaten=self.cards_eaten + eaten,
        )

    def with_swap(self, hand_card: Card, last_chance_card: Card) -> 'Player':
        """手牌与明牌区一换一"""
        if hand_card not in self.hand or last_chance_card not in self.last_chance:
            raise IllegalPlayError(
                f"Cannot swap {hand_card} with {last_chance_card}: "
                f"cards must be in hand and last chance respectively"
            )
        hand = tuple(c for c in self.hand if c != hand_card) + (last_chance_card,)
        last_chance = tuple(c for c in self.last_chance if c != last_chance_card) + (hand_card,)
        return replace(self, hand=sort_cards(hand), last_chance=last_chance)

