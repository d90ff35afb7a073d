"""
评估指标

单局统计快照与多局指标汇总
"""
from typing import Dict, List, Optional
from dataclasses import dataclass, field
from collections import defaultdict
import time

import numpy as np

from core.state import GameState
from core.strategy import Difficulty

from .arena import MatchResult


def format_duration(seconds: float) -> str:
    """秒数格式化为 mm:ss (超过一小时为 h:mm:ss)"""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


@dataclass
class PlayerStatistics:
    """单个玩家的当前统计"""
    name: str
    cards_eaten: int
    hand: int
    last_chance: int
    last_stand: int


@dataclass
class GameStatistics:
    """
    当前对局统计快照

    Attributes:
        difficulty: AI 难度
        game_time: 已进行时间 (秒)
        turn_count: 换手次数
        deck_left: 牌堆剩余张数
        players: 各玩家统计
    """
    difficulty: str
    game_time: float
    turn_count: int
    deck_left: int
    players: List[PlayerStatistics] = field(default_factory=list)

    @classmethod
    def from_state(
        cls,
        state: GameState,
        difficulty: Difficulty,
        now: Optional[float] = None,
    ) -> 'GameStatistics':
        now = time.time() if now is None else now
        return cls(
            difficulty=difficulty.value,
            game_time=now - state.start_time,
            turn_count=state.turn_count,
            deck_left=len(state.deck),
            players=[
                PlayerStatistics(
                    name=p.name,
                    cards_eaten=p.cards_eaten,
                    hand=len(p.hand),
                    last_chance=len(p.last_chance),
                    last_stand=len(p.last_stand),
                )
                for p in state.players
            ],
        )

    def to_rows(self) -> List[str]:
        """按行输出 (用于终端显示)"""
        rows = [
            f"Difficulty: {self.difficulty}",
            f"Game Time: {format_duration(self.game_time)}",
            f"Turn Count: {self.turn_count}",
            f"Deck Cards Left: {self.deck_left}",
        ]
        for p in self.players:
            rows.append(
                f"{p.name}: eaten {p.cards_eaten}, hand {p.hand}, "
                f"last chance {p.last_chance}, last stand {p.last_stand}"
            )
        return rows


class MetricsCollector:
    """
    指标收集器

    汇总多局对局结果
    """

    def __init__(self):
        self.games: List[MatchResult] = []
        self._stats: Dict[str, Dict[str, list]] = defaultdict(lambda: defaultdict(list))

    def add_game(self, result: MatchResult):
        """添加一局结果"""
        self.games.append(result)

        for seat, name in enumerate(result.agents):
            self._stats[name]["wins"].append(1 if result.winner_seat == seat else 0)
            self._stats[name]["lengths"].append(result.length)
            self._stats[name]["cards_eaten"].append(result.cards_eaten[seat])
            self._stats[name]["first_seat"].append(1 if seat == 0 else 0)

    def add_games(self, results: List[MatchResult]):
        for result in results:
            self.add_game(result)

    def compute_metrics(self, player: Optional[str] = None) -> Dict[str, float]:
        """
        计算指标

        Args:
            player: 指定智能体，None 表示全局

        Returns:
            指标字典
        """
        if player is not None:
            stats = self._stats[player]
            n_games = len(stats["wins"])
            if n_games == 0:
                return {}

            return {
                "games": n_games,
                "win_rate": float(np.mean(stats["wins"])),
                "avg_length": float(np.mean(stats["lengths"])),
                "avg_cards_eaten": float(np.mean(stats["cards_eaten"])),
                "max_cards_eaten": float(np.max(stats["cards_eaten"])),
                "first_seat_rate": float(np.mean(stats["first_seat"])),
            }

        n_games = len(self.games)
        if n_games == 0:
            return {}

        lengths = np.array([g.length for g in self.games], dtype=np.float32)
        eaten = np.array([sum(g.cards_eaten) for g in self.games], dtype=np.float32)
        first_seat_wins = sum(1 for g in self.games if g.winner_seat == 0)

        return {
            "games": n_games,
            "avg_length": float(lengths.mean()),
            "std_length": float(lengths.std()),
            "avg_cards_eaten": float(eaten.mean()),
            "first_seat_win_rate": first_seat_wins / n_games,
            "truncated_rate": sum(1 for g in self.games if g.truncated) / n_games,
        }

    def reset(self):
        self.games.clear()
        self._stats.clear()
