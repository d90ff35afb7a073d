"""
奖励函数

支持两种奖励设计:
- 终局奖励 (sparse)
- 过程奖励 (shaped): 终局奖励 + 出牌奖励 + 吃牌惩罚
"""
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from core.state import GameState, Stage


class RewardType(Enum):
    """奖励类型"""
    SPARSE = "sparse"  # 仅终局奖励
    SHAPED = "shaped"  # 过程奖励


@dataclass
class RewardConfig:
    """奖励配置"""
    reward_type: RewardType = RewardType.SPARSE
    win_reward: float = 1.0
    lose_reward: float = -1.0
    shed_bonus: float = 0.01     # 每减少一张牌
    eaten_penalty: float = 0.01  # 每吃一张牌
    invalid_penalty: float = -1.0


class RewardCalculator:
    """
    奖励计算器

    根据配置计算不同类型的奖励
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(
        self,
        state: GameState,
        prev_state: Optional[GameState],
        player_id: int,
    ) -> float:
        """
        计算奖励

        Args:
            state: 当前状态
            prev_state: 前一状态 (用于 shaped 奖励)
            player_id: 计算奖励的玩家座位号

        Returns:
            奖励值
        """
        if self.config.reward_type == RewardType.SPARSE:
            return self._sparse_reward(state, player_id)
        elif self.config.reward_type == RewardType.SHAPED:
            return self._shaped_reward(state, prev_state, player_id)
        else:
            return 0.0

    def _sparse_reward(self, state: GameState, player_id: int) -> float:
        """
        稀疏奖励：仅在游戏结束时给予

        Returns:
            胜利: +1, 失败: -1, 其他: 0
        """
        if state.stage != Stage.GAME_OVER:
            return 0.0

        if state.winner_id == player_id:
            return self.config.win_reward
        return self.config.lose_reward

    def _shaped_reward(
        self,
        state: GameState,
        prev_state: Optional[GameState],
        player_id: int,
    ) -> float:
        """
        过程奖励

        奖励组成:
        1. 终局奖励
        2. 三个牌堆总张数的减少
        3. 吃牌 (含爆牌) 惩罚
        """
        reward = self._sparse_reward(state, player_id)

        if prev_state is None:
            return reward

        before = prev_state.player(player_id)
        after = state.player(player_id)

        shed = before.total_cards - after.total_cards
        if shed > 0:
            reward += shed * self.config.shed_bonus

        eaten = after.cards_eaten - before.cards_eaten
        if eaten > 0:
            reward -= eaten * self.config.eaten_penalty

        return reward


def create_reward_calculator(
    reward_type: str = "sparse",
    **kwargs
) -> RewardCalculator:
    """
    工厂函数：创建奖励计算器

    Args:
        reward_type: 奖励类型 ("sparse", "shaped")
        **kwargs: 其他配置参数

    Returns:
        RewardCalculator 实例
    """
    config = RewardConfig(
        reward_type=RewardType(reward_type),
        **kwargs
    )
    return RewardCalculator(config)
