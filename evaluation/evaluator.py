"""
评估器

智能体定义与胜率评估
"""
from typing import List, Optional
from dataclasses import dataclass, field
import logging
import random

import numpy as np

from core.cards import Card
from core.actions import Move
from core.state import GameState
from core.strategy import Difficulty, get_ai_move, get_ai_starting_cards

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """评估结果"""
    win_rate: float
    avg_length: float
    games_played: int
    avg_cards_eaten: float = 0.0
    truncated_rate: float = 0.0
    extra_stats: dict = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"EvalResult(win_rate={self.win_rate:.2%}, "
            f"avg_length={self.avg_length:.1f}, "
            f"games={self.games_played})"
        )


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, state: GameState) -> Move:
        """为当前玩家选择动作"""
        raise NotImplementedError

    def starting_cards(self, state: GameState, seat: int) -> List[Card]:
        """起手比牌时选择的牌"""
        return get_ai_starting_cards(state.player(seat))

    def reset(self):
        """重置状态"""
        pass


class RandomAgent(Agent):
    """随机智能体: 从合法动作中均匀随机选择"""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        super().__init__(name)
        self._rng = np.random.default_rng(seed)

    def act(self, state: GameState) -> Move:
        legal_moves = state.legal_moves()
        if not legal_moves:
            return Move.eat()
        idx = self._rng.integers(len(legal_moves))
        return legal_moves[idx]


class TierAgent(Agent):
    """
    内置 AI 智能体

    使用内置难度策略选牌
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        name: Optional[str] = None,
        seed: Optional[int] = None,
    ):
        super().__init__(name or difficulty.value.lower())
        self.difficulty = difficulty
        self._rng = random.Random(seed)

    def act(self, state: GameState) -> Move:
        return get_ai_move(state, self.difficulty, rng=self._rng)


class Evaluator:
    """
    评估器

    评估智能体对固定对手的表现
    """

    def __init__(self, max_steps: int = 1000, seed: Optional[int] = None):
        self.max_steps = max_steps
        self.seed = seed

    def evaluate(
        self,
        agent: Agent,
        opponent: Optional[Agent] = None,
        n_games: int = 100,
        verbose: bool = False,
    ) -> EvalResult:
        """
        评估智能体

        Args:
            agent: 待评估智能体
            opponent: 对手 (默认 Medium)
            n_games: 游戏数量
            verbose: 是否输出详情

        Returns:
            评估结果
        """
        from .arena import Arena

        if opponent is None:
            opponent = TierAgent(Difficulty.MEDIUM, name="opponent")

        arena = Arena(max_steps=self.max_steps, seed=self.seed)
        wins = 0
        lengths = []
        eaten = []
        truncated = 0

        for game_idx in range(n_games):
            # 轮流坐 0 号和 1 号位
            seat = game_idx % 2
            agents = (agent, opponent) if seat == 0 else (opponent, agent)
            result = arena.play_game(agents, game_idx)

            if result.winner_seat == seat:
                wins += 1
            lengths.append(result.length)
            eaten.append(result.cards_eaten[seat])
            truncated += int(result.truncated)

            if verbose and (game_idx + 1) % 10 == 0:
                logger.info(f"Game {game_idx + 1}/{n_games}, Win rate: {wins/(game_idx+1):.2%}")

        return EvalResult(
            win_rate=wins / n_games if n_games > 0 else 0.0,
            avg_length=float(np.mean(lengths)) if lengths else 0.0,
            games_played=n_games,
            avg_cards_eaten=float(np.mean(eaten)) if eaten else 0.0,
            truncated_rate=truncated / n_games if n_games > 0 else 0.0,
        )
