"""
Environment Layer - Gymnasium 兼容环境

Modules:
    quatch_env: 主环境类
    observation: 观测空间构建与动作编码
    reward: 奖励函数
    wrappers: 环境包装器
"""
from .quatch_env import (
    QuatchEnv,
    make_env,
)

from .observation import (
    Observation,
    ObservationBuilder,
    ActionEncoder,
    NUM_ACTIONS,
    get_action_encoder,
)

from .reward import (
    RewardType,
    RewardConfig,
    RewardCalculator,
    create_reward_calculator,
)

from .wrappers import (
    FlattenObservationWrapper,
    LegalActionMaskWrapper,
    RecordEpisodeStatistics,
    wrap_env,
)

__all__ = [
    # env
    "QuatchEnv",
    "make_env",
    # observation
    "Observation",
    "ObservationBuilder",
    "ActionEncoder",
    "NUM_ACTIONS",
    "get_action_encoder",
    # reward
    "RewardType",
    "RewardConfig",
    "RewardCalculator",
    "create_reward_calculator",
    # wrappers
    "FlattenObservationWrapper",
    "LegalActionMaskWrapper",
    "RecordEpisodeStatistics",
    "wrap_env",
]
