"""
Core Layer - 纯游戏逻辑

Modules:
    cards: 牌定义与编码
    player: 玩家与三级牌堆
    actions: 动作类型与生成
    rules: 规则引擎
    strategy: AI 出牌策略
    state: 游戏状态与结算
    config: 对局配置
    errors: 业务异常
"""
from .cards import (
    Suit,
    Rank,
    Card,
    SPECIAL_RANKS,
    DECK_SIZE,
    build_deck,
    shuffle,
    sort_cards,
    group_by_rank,
    cards_to_array,
    rank_counts,
    cards_to_str,
    str_to_cards,
)

from .errors import (
    QuatchError,
    IllegalPlayError,
    IllegalEatError,
    StageError,
)

from .player import PileSource, Player

from .rules import RuleEngine, HAND_SIZE, DEAL_SIZE

from .actions import MoveType, Move, MoveGenerator

from .strategy import (
    Difficulty,
    get_ai_starting_cards,
    get_all_possible_plays,
    get_ai_play,
    get_ai_move,
)

from .config import GameConfig

from .state import (
    Stage,
    PlayResult,
    GameState,
    PLAYER_COUNT,
    resolve_play_off,
)

__all__ = [
    # cards
    "Suit",
    "Rank",
    "Card",
    "SPECIAL_RANKS",
    "DECK_SIZE",
    "build_deck",
    "shuffle",
    "sort_cards",
    "group_by_rank",
    "cards_to_array",
    "rank_counts",
    "cards_to_str",
    "str_to_cards",
    # errors
    "QuatchError",
    "IllegalPlayError",
    "IllegalEatError",
    "StageError",
    # player
    "PileSource",
    "Player",
    # rules
    "RuleEngine",
    "HAND_SIZE",
    "DEAL_SIZE",
    # actions
    "MoveType",
    "Move",
    "MoveGenerator",
    # strategy
    "Difficulty",
    "get_ai_starting_cards",
    "get_all_possible_plays",
    "get_ai_play",
    "get_ai_move",
    # config
    "GameConfig",
    # state
    "Stage",
    "PlayResult",
    "GameState",
    "PLAYER_COUNT",
    "resolve_play_off",
]
