"""
Quatch Gymnasium 环境

遵循标准 Gymnasium API, 智能体控制一个座位, 另一座位由内置 AI 行动
"""
from typing import Dict, Any, Tuple, Optional, List, Union
import logging
import random

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from core.state import GameState, Stage
from core.actions import Move
from core.cards import cards_to_str
from core.strategy import Difficulty, get_ai_move, get_ai_starting_cards

from .observation import (
    ObservationBuilder,
    OBSERVATION_SHAPES,
    get_action_encoder,
)
from .reward import RewardCalculator, RewardConfig, RewardType

logger = logging.getLogger(__name__)


class QuatchEnv(gym.Env):
    """
    Quatch Gymnasium 环境

    - reset(): 发牌, 跳过换牌, 起手比牌, 对手行动直到轮到智能体
    - step(): 执行智能体动作, 然后对手行动直到再次轮到智能体或游戏结束

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "Quatch-v0",
    }

    def __init__(
        self,
        render_mode: Optional[str] = None,
        reward_type: str = "sparse",
        opponent: str = "Medium",
        agent_seat: int = 0,
        max_steps: int = 500,
        seed: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            reward_type: 奖励类型 ("sparse", "shaped")
            opponent: 对手难度 ("Easy", "Medium", "Hard", "Extreme")
            agent_seat: 智能体座位号
            max_steps: 单局最大步数 (超过则截断)
            seed: 随机种子
        """
        super().__init__()

        if agent_seat not in (0, 1):
            raise ValueError(f"agent_seat must be 0 or 1, got {agent_seat}")

        self.render_mode = render_mode
        self.agent_seat = agent_seat
        self.max_steps = max_steps
        self._seed = seed

        # 对手难度
        self.opponent = Difficulty(opponent.capitalize())

        # 观测构建器
        self._obs_builder = ObservationBuilder()

        # 奖励计算器
        self._reward_calculator = RewardCalculator(
            RewardConfig(reward_type=RewardType(reward_type))
        )

        # 动作编码器
        self._action_encoder = get_action_encoder()

        # 状态
        self._state: Optional[GameState] = None
        self._prev_state: Optional[GameState] = None
        self._opponent_rng = random.Random(seed)
        self._step_count = 0

        # 定义空间
        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        # 动作空间: 吃牌 / 出牌 (牌面 × 张数) / 翻暗牌
        self.action_space = spaces.Discrete(self._action_encoder.num_actions)

        # 观测空间: 字典形式
        self.observation_space = spaces.Dict({
            key: spaces.Box(0, 1, shape=shape, dtype=np.float32)
            for key, shape in OBSERVATION_SHAPES.items()
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境

        Args:
            seed: 随机种子
            options: 额外选项

        Returns:
            (observation, info) 元组
        """
        # 首次重置使用构造时的种子
        if seed is None and self._state is None:
            seed = self._seed
        super().reset(seed=seed)

        game_seed = int(self.np_random.integers(0, 2**31 - 1))
        self._opponent_rng = random.Random(game_seed)
        self._step_count = 0

        state = GameState.initial(
            player_name="Agent",
            opponent_name=f"{self.opponent.value} AI",
            seed=game_seed,
            human_seat=self.agent_seat,
        )
        state = state.with_full_deal().with_start()
        selections = [get_ai_starting_cards(p) for p in state.players]
        state = state.with_play_off(selections)
        logger.debug("New game %d, seat %s leads", game_seed, state.current_player_id)

        self._state = self._run_opponent(state)
        self._prev_state = None

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: Union[int, Move],
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 动作索引或 Move 对象

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._state is None:
            raise RuntimeError("Environment not reset. Call reset() first.")
        if self._state.is_finished:
            raise RuntimeError("Episode is finished. Call reset() first.")

        move = self._decode_action(action)

        # 非法动作: 给予惩罚并保持状态
        if move is None or move not in self._state.legal_moves():
            obs = self._build_observation()
            info = self._build_info()
            info["error"] = "Invalid action"
            return obs, self._reward_calculator.config.invalid_penalty, False, False, info

        self._prev_state = self._state
        self._step_count += 1

        state = self._state.with_move(move)
        self._state = self._run_opponent(state)

        obs = self._build_observation()
        reward = self._reward_calculator.compute(self._state, self._prev_state, self.agent_seat)

        terminated = self._state.is_finished
        truncated = not terminated and self._step_count >= self.max_steps

        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _decode_action(self, action: Union[int, Move]) -> Optional[Move]:
        """解码动作"""
        if isinstance(action, Move):
            return action
        elif isinstance(action, (int, np.integer)):
            return self._action_encoder.decode(int(action), self._state.current_player)
        else:
            raise ValueError(f"Invalid action type: {type(action)}")

    def _run_opponent(self, state: GameState) -> GameState:
        """对手行动直到轮到智能体或游戏结束"""
        while not state.is_finished and state.current_player_id != self.agent_seat:
            move = get_ai_move(state, self.opponent, rng=self._opponent_rng)
            state = state.with_move(move)
        return state

    def _build_observation(self) -> Dict[str, np.ndarray]:
        """构建观测"""
        return self._obs_builder.build(self._state, self.agent_seat).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        legal_moves = self._state.legal_moves()

        info = {
            "current_player": self._state.current_player_id,
            "stage": self._state.stage.value,
            "legal_actions": legal_moves,
            "step_count": self._step_count,
            "turn_count": self._state.turn_count,
            "cards_eaten": tuple(p.cards_eaten for p in self._state.players),
        }

        if self._state.stage == Stage.PLAY:
            # 添加动作掩码
            info["legal_action_mask"] = self._action_encoder.build_legal_mask(legal_moves)
            info["legal_action_indices"] = self._action_encoder.get_legal_action_indices(
                legal_moves
            )

        if self._state.is_finished:
            info["winner"] = self._state.winner_id

        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode == "ansi" or self.render_mode == "human":
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        state = self._state
        lines = []
        lines.append("=" * 50)
        lines.append(f"Stage: {state.stage.value}")
        if state.current_player is not None:
            lines.append(f"Current Player: {state.current_player.name}")
        lines.append(f"Deck: {len(state.deck)}  Bin: {len(state.bin)}")
        lines.append(f"Pile: {cards_to_str(state.mpa) or '-'}")

        for p in state.players:
            lines.append(
                f"{p.name}: hand [{cards_to_str(p.hand)}] "
                f"last chance [{cards_to_str(p.last_chance)}] "
                f"last stand {len(p.last_stand)}"
            )

        if state.is_finished:
            lines.append(f"Winner: {state.winner.name}")

        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    def close(self):
        """关闭环境"""
        pass

    @property
    def state(self) -> Optional[GameState]:
        """获取当前状态 (用于调试)"""
        return self._state

    def get_legal_actions(self) -> List[Move]:
        """获取当前合法动作"""
        if self._state is None:
            return []
        return self._state.legal_moves()


def make_env(
    env_id: str = "Quatch-v0",
    **kwargs
) -> QuatchEnv:
    """
    工厂函数：创建环境

    Args:
        env_id: 环境 ID
        **kwargs: 环境参数

    Returns:
        QuatchEnv 实例
    """
    if env_id != QuatchEnv.metadata["name"]:
        raise ValueError(f"Unknown env id: {env_id}")
    return QuatchEnv(**kwargs)
