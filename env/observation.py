"""
观察空间编码

将游戏状态转换为数值特征, 并在动作与离散索引之间转换
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from core.cards import Card, Rank, DECK_SIZE, cards_to_array, group_by_rank
from core.actions import Move, MoveType
from core.player import Player
from core.rules import DEAL_SIZE
from core.state import GameState


# 单个牌面最多 4 张
MAX_GROUP = 4
NUM_RANKS = 13

# 动作索引布局
EAT_INDEX = 0
PLAY_OFFSET = 1
LAST_STAND_OFFSET = PLAY_OFFSET + NUM_RANKS * MAX_GROUP  # 53
NUM_ACTIONS = LAST_STAND_OFFSET + DEAL_SIZE              # 56


@dataclass
class Observation:
    """
    结构化观测 (始终从 perspective 玩家视角)

    Attributes:
        hand: 自己的手牌 (52,)
        last_chance: 自己的明牌区 (52,)
        last_stand: 自己暗牌张数, 归一化 (1,)
        mpa: 出牌区 (52,)
        top_rank: 顶牌牌面 one-hot (13,)
        bin: 弃牌区 (52,)
        opponent_last_chance: 对手明牌区 (52,)
        opponent_piles: 对手三个牌堆张数, 归一化 (3,)
        deck: 牌堆剩余张数, 归一化 (1,)
        reset: 顶牌是否为 2 (1,)
        combo: 顶部连续同牌面张数, 归一化 (1,)
    """
    hand: np.ndarray
    last_chance: np.ndarray
    last_stand: np.ndarray
    mpa: np.ndarray
    top_rank: np.ndarray
    bin: np.ndarray
    opponent_last_chance: np.ndarray
    opponent_piles: np.ndarray
    deck: np.ndarray
    reset: np.ndarray
    combo: np.ndarray

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "hand": self.hand,
            "last_chance": self.last_chance,
            "last_stand": self.last_stand,
            "mpa": self.mpa,
            "top_rank": self.top_rank,
            "bin": self.bin,
            "opponent_last_chance": self.opponent_last_chance,
            "opponent_piles": self.opponent_piles,
            "deck": self.deck,
            "reset": self.reset,
            "combo": self.combo,
        }

    def to_flat_array(self) -> np.ndarray:
        """
        展平为单一向量

        特征维度: 52 * 5 + 13 + 3 + 1 * 4 = 280
        """
        return np.concatenate(list(self.to_dict().values()))


# 各观测项的形状 (用于定义 observation_space)
OBSERVATION_SHAPES: Dict[str, tuple] = {
    "hand": (52,),
    "last_chance": (52,),
    "last_stand": (1,),
    "mpa": (52,),
    "top_rank": (NUM_RANKS,),
    "bin": (52,),
    "opponent_last_chance": (52,),
    "opponent_piles": (3,),
    "deck": (1,),
    "reset": (1,),
    "combo": (1,),
}


class ObservationBuilder:
    """
    观测构建器

    负责将 GameState 转换为 Observation, 只包含该玩家可见的信息
    """

    def __init__(self, max_hand: int = DECK_SIZE):
        """
        Args:
            max_hand: 手牌张数归一化分母
        """
        self.max_hand = max_hand

    def build(self, state: GameState, perspective: int) -> Observation:
        """
        从游戏状态构建观测

        Args:
            state: 游戏状态
            perspective: 视角玩家座位号

        Returns:
            Observation 对象
        """
        me = state.player(perspective)
        opponent = state.opponent_of(perspective)

        return Observation(
            hand=cards_to_array(me.hand),
            last_chance=cards_to_array(me.last_chance),
            last_stand=np.array([len(me.last_stand) / DEAL_SIZE], dtype=np.float32),
            mpa=cards_to_array(state.mpa),
            top_rank=self._encode_top_rank(state.target_card),
            bin=cards_to_array(state.bin),
            opponent_last_chance=cards_to_array(opponent.last_chance),
            opponent_piles=self._encode_piles(opponent),
            deck=np.array([len(state.deck) / DECK_SIZE], dtype=np.float32),
            reset=np.array([float(state.is_reset)], dtype=np.float32),
            combo=np.array([state.combo_count / MAX_GROUP], dtype=np.float32),
        )

    def _encode_top_rank(self, target: Optional[Card]) -> np.ndarray:
        result = np.zeros(NUM_RANKS, dtype=np.float32)
        if target is not None:
            result[target.value - 2] = 1
        return result

    def _encode_piles(self, player: Player) -> np.ndarray:
        """对手手牌 / 明牌区 / 暗牌区张数"""
        return np.array([
            min(len(player.hand) / self.max_hand, 1.0),
            len(player.last_chance) / DEAL_SIZE,
            len(player.last_stand) / DEAL_SIZE,
        ], dtype=np.float32)


class ActionEncoder:
    """
    动作编码器

    将 Move 与固定大小的离散索引相互转换:
    - 0: 吃牌
    - 1 + (牌面 - 2) * 4 + (张数 - 1): 出牌
    - 53 + 位置: 翻暗牌
    """

    @property
    def num_actions(self) -> int:
        """动作空间大小"""
        return NUM_ACTIONS

    def encode(self, move: Move) -> int:
        """
        将 Move 编码为索引

        Args:
            move: 动作

        Returns:
            动作索引, 无法编码返回 -1
        """
        if move.move_type == MoveType.EAT:
            return EAT_INDEX
        if move.move_type == MoveType.LAST_STAND:
            if 0 <= move.index < DEAL_SIZE:
                return LAST_STAND_OFFSET + move.index
            return -1
        if not move.cards or len(move.cards) > MAX_GROUP:
            return -1
        rank = move.cards[0].rank
        return PLAY_OFFSET + (rank - Rank.TWO) * MAX_GROUP + (len(move.cards) - 1)

    def decode(self, idx: int, player: Player) -> Optional[Move]:
        """
        将索引解码为具体 Move

        出牌索引取当前来源牌堆中该牌面的前 count 张

        Args:
            idx: 动作索引
            player: 行动玩家

        Returns:
            Move 对象; 索引越界或牌不足时返回 None
        """
        if idx == EAT_INDEX:
            return Move.eat()

        if LAST_STAND_OFFSET <= idx < NUM_ACTIONS:
            return Move.last_stand(idx - LAST_STAND_OFFSET)

        if not PLAY_OFFSET <= idx < LAST_STAND_OFFSET:
            return None

        rank_idx, count_idx = divmod(idx - PLAY_OFFSET, MAX_GROUP)
        rank = Rank(rank_idx + 2)
        group = group_by_rank(player.active_pile).get(rank, [])
        count = count_idx + 1
        if len(group) < count:
            return None
        return Move.play(group[:count])

    def get_legal_action_indices(self, legal_moves: List[Move]) -> List[int]:
        """
        获取合法动作的索引列表

        Args:
            legal_moves: 合法动作列表

        Returns:
            索引列表
        """
        indices = []
        for move in legal_moves:
            idx = self.encode(move)
            if idx >= 0:
                indices.append(idx)
        return indices

    def build_legal_mask(self, legal_moves: List[Move]) -> np.ndarray:
        """
        构建合法动作掩码

        Args:
            legal_moves: 合法动作列表

        Returns:
            (num_actions,) 0/1 数组
        """
        mask = np.zeros(NUM_ACTIONS, dtype=np.float32)
        for idx in self.get_legal_action_indices(legal_moves):
            mask[idx] = 1
        return mask


# 全局单例
_action_encoder: Optional[ActionEncoder] = None


def get_action_encoder() -> ActionEncoder:
    """获取全局动作编码器"""
    global _action_encoder
    if _action_encoder is None:
        _action_encoder = ActionEncoder()
    return _action_encoder
