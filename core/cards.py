"""
牌的定义与编码

Quatch 使用 46 张牌：
- 3-9, J, Q, K, A 各 4 张 (每种花色一张)
- 2 和 10 各只有 1 张 (花色随机)
"""
from enum import Enum, IntEnum
from dataclasses import dataclass
from typing import List, Tuple, Dict, Iterable, Optional
from collections import Counter
import random

import numpy as np


class Suit(Enum):
    """花色"""
    SPADES = "♠"
    HEARTS = "♥"
    CLUBS = "♣"
    DIAMONDS = "♦"


class Rank(IntEnum):
    """牌面值定义 (数值即大小)"""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


# 牌面值到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    2: '2', 3: '3', 4: '4', 5: '5', 6: '6', 7: '7', 8: '8',
    9: '9', 10: '10', 11: 'J', 12: 'Q', 13: 'K', 14: 'A',
}

# 显示字符到牌面值的映射
STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}

# 花色到数组行索引的映射 (用于 one-hot 编码)
SUIT_TO_ROW: Dict[Suit, int] = {suit: i for i, suit in enumerate(Suit)}

# 特殊牌: 2 (重置) 和 10 (清台)
SPECIAL_RANKS: Tuple[Rank, ...] = (Rank.TWO, Rank.TEN)

# 只保留一张的牌面
SINGLETON_RANKS: Tuple[Rank, ...] = (Rank.TWO, Rank.TEN)

DECK_SIZE = 46


@dataclass(frozen=True)
class Card:
    """
    不可变的单张牌

    Attributes:
        suit: 花色
        rank: 牌面
    """
    suit: Suit
    rank: Rank

    @property
    def value(self) -> int:
        return int(self.rank)

    @property
    def id(self) -> str:
        """唯一标识, 如 "10-♠" """
        return f"{RANK_TO_STR[self.rank]}-{self.suit.value}"

    @property
    def is_special(self) -> bool:
        return self.rank in SPECIAL_RANKS

    def __str__(self) -> str:
        return f"{RANK_TO_STR[self.rank]}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card({self})"


def build_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    构建 46 张牌组 (未洗牌)

    标准 52 张去掉所有 2 和 10, 再各补回一张随机花色的 2 和 10

    Args:
        rng: 随机数生成器 (决定 2 和 10 的花色)

    Returns:
        46 张牌
    """
    rng = rng or random.Random()
    suits = list(Suit)

    deck = [
        Card(suit, rank)
        for suit in suits
        for rank in Rank
        if rank not in SINGLETON_RANKS
    ]

    for rank in SINGLETON_RANKS:
        deck.append(Card(rng.choice(suits), rank))

    return deck


def shuffle(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    均匀随机洗牌 (Fisher-Yates), 返回新列表

    Args:
        cards: 牌列表
        rng: 随机数生成器

    Returns:
        洗好的新列表
    """
    rng = rng or random.Random()
    shuffled = list(cards)
    rng.shuffle(shuffled)
    return shuffled


def sort_cards(cards: Iterable[Card]) -> Tuple[Card, ...]:
    """按牌面值升序排序 (同值保持原有顺序)"""
    return tuple(sorted(cards, key=lambda c: c.value))


def group_by_rank(cards: Iterable[Card]) -> Dict[Rank, List[Card]]:
    """
    按牌面分组, 保持首次出现的顺序

    Args:
        cards: 牌列表

    Returns:
        牌面 -> 该牌面的牌 (保持原有顺序)
    """
    groups: Dict[Rank, List[Card]] = {}
    for card in cards:
        groups.setdefault(card.rank, []).append(card)
    return groups


def is_same_rank(cards: Iterable[Card]) -> bool:
    """检查是否为同一牌面 (空列表返回 False)"""
    ranks = {card.rank for card in cards}
    return len(ranks) == 1


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 52 维 one-hot 向量

    编码方式:
    - 4 (花色) × 13 (牌面 2-A) 矩阵按列展开

    Args:
        cards: 牌列表

    Returns:
        52 维 numpy 数组
    """
    matrix = np.zeros((4, 13), dtype=np.float32)
    for card in cards:
        matrix[SUIT_TO_ROW[card.suit], card.value - 2] = 1
    return matrix.flatten('F')


def rank_counts(cards: Iterable[Card]) -> np.ndarray:
    """
    统计各牌面数量

    Returns:
        13 维数组, 下标 0 对应 2, 下标 12 对应 A
    """
    counts = np.zeros(13, dtype=np.float32)
    for rank, count in Counter(card.rank for card in cards).items():
        counts[rank - 2] = count
    return counts


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "3♠ 3♥ 10♦"
    """
    return ' '.join(str(c) for c in cards)


def str_to_cards(s: str) -> List[Card]:
    """
    将字符串转换为牌列表

    Args:
        s: 空格分隔的牌, 如 "3♠ 10♦ K♥"

    Returns:
        牌列表
    """
    suits_by_symbol = {suit.value: suit for suit in Suit}
    cards = []
    for token in s.split():
        rank_str, suit_str = token[:-1], token[-1]
        if rank_str not in STR_TO_RANK or suit_str not in suits_by_symbol:
            raise ValueError(f"Invalid card: {token!r}")
        cards.append(Card(suits_by_symbol[suit_str], Rank(STR_TO_RANK[rank_str])))
    return cards
