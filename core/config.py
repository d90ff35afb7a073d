"""
对局配置

定义玩家名字、AI 难度和随机种子等设置
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .strategy import Difficulty


DEFAULT_PLAYER_NAME = "Player 1"
DEFAULT_OPPONENT_NAME = "Opponent"


def normalize_name(name: Optional[str], default: str) -> str:
    """去掉首尾空白, 空名字使用默认值"""
    name = (name or "").strip()
    return name or default


@dataclass
class GameConfig:
    """
    对局配置

    Attributes:
        player_name: 玩家名字
        opponent_name: 对手名字
        difficulty: AI 难度 ("Easy", "Medium", "Hard", "Extreme")
        seed: 随机种子
        human_seat: 人类玩家座位号
    """
    player_name: str = DEFAULT_PLAYER_NAME
    opponent_name: str = DEFAULT_OPPONENT_NAME
    difficulty: str = "Medium"
    seed: Optional[int] = None
    human_seat: int = 0

    def __post_init__(self):
        if self.human_seat not in (0, 1):
            raise ValueError(f"human_seat must be 0 or 1, got {self.human_seat}")
        # 统一为标准写法, 同时校验难度
        self.difficulty = self.difficulty_tier.value

    @property
    def difficulty_tier(self) -> Difficulty:
        try:
            return Difficulty(self.difficulty.capitalize())
        except ValueError:
            valid = ", ".join(d.value for d in Difficulty)
            raise ValueError(f"Unknown difficulty {self.difficulty!r} (expected one of: {valid})")

    def normalized_names(self) -> Tuple[str, str]:
        return (
            normalize_name(self.player_name, DEFAULT_PLAYER_NAME),
            normalize_name(self.opponent_name, DEFAULT_OPPONENT_NAME),
        )

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
