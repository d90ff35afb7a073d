"""
AI 出牌策略

四个难度共用同一个候选枚举步骤, 只有选择策略按难度区分:
- Easy: 总是出最小的牌, 空台/重置时尽量不用 2 和 10
- Medium: 压力局面出最大的普通牌逼对手吃牌, 否则出最小的
- Hard: 出牌区较大时主动用 10 清台, 可只出同牌面的一部分
- Extreme: 更早进入压力局面, 普通局面尽量多出牌
"""
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional
import random

from .cards import Card, Rank
from .actions import Move, MoveGenerator
from .player import Player
from .rules import RuleEngine

if TYPE_CHECKING:
    from .state import GameState


class Difficulty(Enum):
    """AI 难度"""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXTREME = "Extreme"


# 允许只出同牌面一部分的难度
PARTIAL_PLAY_TIERS = (Difficulty.HARD, Difficulty.EXTREME)


def is_pressure(mpa_size: int, deck_size: int) -> bool:
    """Medium/Hard 压力局面: 出牌区够大, 或牌堆将尽且出牌区不小"""
    return mpa_size >= 5 or (deck_size <= 10 and mpa_size >= 3)


def is_extreme_pressure(mpa_size: int, deck_size: int) -> bool:
    """Extreme 压力局面"""
    return mpa_size >= 3 or (deck_size <= 15 and mpa_size >= 2)


def get_ai_starting_cards(player: Player) -> List[Card]:
    """
    起手比牌时选择的牌

    Args:
        player: 玩家

    Returns:
        最小的非特殊牌面的所有手牌; 只有 2/10 时返回空 (放弃比牌)
    """
    startable = RuleEngine.startable_cards(player)
    if not startable:
        return []
    lowest = min(c.value for c in startable)
    return [c for c in startable if c.value == lowest]


def get_all_possible_plays(
    player: Player,
    target: Optional[Card],
    difficulty: Difficulty,
) -> List[List[Card]]:
    """
    枚举当前来源牌堆的所有合法出牌

    Easy/Medium 只能整组出牌, Hard/Extreme 可出每个前缀子集
    """
    generator = MoveGenerator(player, target, partial=difficulty in PARTIAL_PLAY_TIERS)
    return generator.gen_plays()


def _split(plays: List[List[Card]]):
    special = [p for p in plays if RuleEngine.is_special(p[0].rank)]
    normal = [p for p in plays if not RuleEngine.is_special(p[0].rank)]
    return special, normal


def _find_rank(plays: List[List[Card]], rank: Rank) -> Optional[List[Card]]:
    for play in plays:
        if play[0].rank == rank:
            return play
    return None


def _prefer_ten_then_two(special: List[List[Card]]) -> Optional[List[Card]]:
    return _find_rank(special, Rank.TEN) or _find_rank(special, Rank.TWO)


def _easy(plays, target, mpa_size, deck_size) -> List[Card]:
    _, normal = _split(plays)

    # 空台或重置时有普通牌就不浪费 2/10
    if (mpa_size == 0 or (target is not None and target.rank == Rank.TWO)) and normal:
        return min(normal, key=lambda p: p[0].value)

    return min(plays, key=lambda p: p[0].value)


def _medium(plays, target, mpa_size, deck_size) -> List[Card]:
    special, normal = _split(plays)

    if normal:
        if is_pressure(mpa_size, deck_size):
            return sorted(normal, key=lambda p: (-p[0].value, -len(p)))[0]
        return sorted(normal, key=lambda p: (p[0].value, -len(p)))[0]

    return _prefer_ten_then_two(special) or plays[0]


def _make_hard(extreme: bool) -> Callable:
    ten_threshold = 3 if extreme else 5

    def select(plays, target, mpa_size, deck_size) -> List[Card]:
        special, normal = _split(plays)
        ten_play = _find_rank(special, Rank.TEN)

        # 出牌区足够大时主动清台
        if ten_play and mpa_size >= ten_threshold:
            return ten_play

        pressure = is_pressure(mpa_size, deck_size)
        if extreme:
            pressure = pressure or is_extreme_pressure(mpa_size, deck_size)

        if pressure and normal:
            return sorted(normal, key=lambda p: (-p[0].value, len(p)))[0]

        if normal:
            if extreme:
                return sorted(normal, key=lambda p: (p[0].value, -len(p)))[0]
            return sorted(normal, key=lambda p: (p[0].value, len(p)))[0]

        return _prefer_ten_then_two(special) or plays[0]

    return select


# 难度 -> 选择策略
STRATEGIES: Dict[Difficulty, Callable] = {
    Difficulty.EASY: _easy,
    Difficulty.MEDIUM: _medium,
    Difficulty.HARD: _make_hard(extreme=False),
    Difficulty.EXTREME: _make_hard(extreme=True),
}


def get_ai_play(
    player: Player,
    target: Optional[Card],
    mpa_size: int,
    deck_size: int,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """
    AI 选择出牌

    Args:
        player: AI 玩家
        target: 出牌区顶牌
        mpa_size: 出牌区张数
        deck_size: 牌堆剩余张数
        difficulty: 难度
        rng: 随机数生成器 (暗牌阶段使用)

    Returns:
        要出的牌; 空列表表示必须吃牌; 暗牌阶段返回随机一张暗牌
    """
    if player.is_blind and player.last_stand:
        rng = rng or random.Random()
        return [rng.choice(player.last_stand)]

    plays = get_all_possible_plays(player, target, difficulty)
    if not plays:
        return []

    return list(STRATEGIES[difficulty](plays, target, mpa_size, deck_size))


def get_ai_move(
    state: 'GameState',
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Move:
    """
    为当前玩家选择一个动作

    空选择转为吃牌, 暗牌阶段转为按位置翻牌
    """
    player = state.current_player
    cards = get_ai_play(
        player,
        state.target_card,
        len(state.mpa),
        len(state.deck),
        difficulty,
        rng=rng,
    )
    if not cards:
        return Move.eat()
    if player.is_blind:
        return Move.last_stand(player.last_stand.index(cards[0]))
    return Move.play(cards)
