"""
对战竞技场

组织智能体之间的完整对局
"""
from typing import Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from collections import defaultdict
from itertools import combinations
import logging

from core.state import GameState, Stage

from .evaluator import Agent

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """对局结果"""
    agents: Tuple[str, str]  # (0 号位, 1 号位)
    winner: Optional[str]
    winner_seat: Optional[int]
    length: int  # 动作数
    turns: int   # 换手次数
    cards_eaten: Tuple[int, int]
    truncated: bool = False


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    total_games: int
    matches: List[MatchResult]

    def get_ranking(self) -> List[Tuple[str, float]]:
        """获取排名"""
        return sorted(
            [(name, stats["win_rate"]) for name, stats in self.standings.items()],
            key=lambda x: x[1],
            reverse=True,
        )

    def __repr__(self) -> str:
        ranking = self.get_ranking()
        lines = [f"Tournament Results ({self.total_games} games):"]
        for i, (name, win_rate) in enumerate(ranking):
            lines.append(f"  {i+1}. {name}: {win_rate:.2%}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    在 GameState 上直接运行对局: 发牌、不换牌、起手比牌、轮流行动直到结束
    """

    def __init__(self, max_steps: int = 1000, seed: Optional[int] = None):
        """
        Args:
            max_steps: 单局最大动作数 (超过则截断)
            seed: 基础随机种子, 第 i 局使用 seed + i
        """
        self.max_steps = max_steps
        self.seed = seed

    def new_game(self, agents: Sequence[Agent], game_idx: int = 0) -> GameState:
        """发完牌并完成起手比牌的新对局"""
        seed = None if self.seed is None else self.seed + game_idx
        state = GameState.initial(agents[0].name, agents[1].name, seed=seed)
        state = state.with_full_deal().with_start()

        selections = [agent.starting_cards(state, seat) for seat, agent in enumerate(agents)]
        return state.with_play_off(selections)

    def play_game(self, agents: Sequence[Agent], game_idx: int = 0) -> MatchResult:
        """
        进行一局

        Args:
            agents: 2 个智能体 (按座位)
            game_idx: 对局编号 (决定随机种子)

        Returns:
            对局结果
        """
        assert len(agents) == 2

        for agent in agents:
            agent.reset()

        state = self.new_game(agents, game_idx)
        length = 1  # 起手那一手

        while state.stage != Stage.GAME_OVER and length < self.max_steps:
            agent = agents[state.current_player_id]
            state = state.with_move(agent.act(state))
            length += 1

        truncated = state.stage != Stage.GAME_OVER
        if truncated:
            logger.warning(f"Game {game_idx} truncated after {length} moves")

        return MatchResult(
            agents=(agents[0].name, agents[1].name),
            winner=agents[state.winner_id].name if state.winner_id is not None else None,
            winner_seat=state.winner_id,
            length=length,
            turns=state.turn_count,
            cards_eaten=tuple(p.cards_eaten for p in state.players),
            truncated=truncated,
        )

    def play_match(
        self,
        agent_a: Agent,
        agent_b: Agent,
        n_games: int = 1,
    ) -> List[MatchResult]:
        """
        进行多局, 轮流交换座位

        Args:
            agent_a: 智能体 A
            agent_b: 智能体 B
            n_games: 对局数

        Returns:
            对局结果列表
        """
        results = []
        for game_idx in range(n_games):
            agents = (agent_a, agent_b) if game_idx % 2 == 0 else (agent_b, agent_a)
            results.append(self.play_game(agents, game_idx))
        return results

    def round_robin(
        self,
        agents: List[Agent],
        games_per_match: int = 10,
    ) -> TournamentResult:
        """
        循环赛

        每两个智能体之间对战

        Args:
            agents: 智能体列表
            games_per_match: 每场比赛的对局数

        Returns:
            锦标赛结果
        """
        standings = {agent.name: defaultdict(float) for agent in agents}
        all_matches = []

        for agent_a, agent_b in combinations(agents, 2):
            results = self.play_match(agent_a, agent_b, games_per_match)
            all_matches.extend(results)

            for result in results:
                for seat, name in enumerate(result.agents):
                    standings[name]["games"] += 1
                    standings[name]["cards_eaten"] += result.cards_eaten[seat]
                    if result.winner_seat == seat:
                        standings[name]["wins"] += 1

            logger.info(f"{agent_a.name} vs {agent_b.name}: {len(results)} games")

        # 计算胜率
        for name, stats in standings.items():
            games = stats["games"]
            stats["win_rate"] = stats["wins"] / games if games > 0 else 0.0
            stats["avg_cards_eaten"] = stats["cards_eaten"] / games if games > 0 else 0.0

        return TournamentResult(
            standings={name: dict(stats) for name, stats in standings.items()},
            total_games=len(all_matches),
            matches=all_matches,
        )
