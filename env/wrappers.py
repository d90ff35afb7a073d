"""
环境包装器

展平观测、动作掩码和回合统计
"""
from typing import Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import ObservationWrapper, Wrapper

from .observation import OBSERVATION_SHAPES


class FlattenObservationWrapper(ObservationWrapper):
    """字典观测按 OBSERVATION_SHAPES 的顺序拼成一个向量"""

    def __init__(self, env: gym.Env):
        super().__init__(env)
        size = sum(int(np.prod(shape)) for shape in OBSERVATION_SHAPES.values())
        self.observation_space = gym.spaces.Box(0.0, 1.0, shape=(size,), dtype=np.float32)

    def observation(self, obs: Dict[str, np.ndarray]) -> np.ndarray:
        parts = [np.ravel(obs[key]) for key in OBSERVATION_SHAPES]
        return np.concatenate(parts).astype(np.float32, copy=False)


class LegalActionMaskWrapper(Wrapper):
    """
    info["action_mask"]: 智能体当前的合法动作掩码

    对局结束后掩码全为 0
    """

    def reset(self, **kwargs):
        obs, info = self.env.reset(**kwargs)
        info["action_mask"] = self._mask(info)
        return obs, info

    def step(self, action):
        obs, reward, terminated, truncated, info = self.env.step(action)
        info["action_mask"] = self._mask(info)
        return obs, reward, terminated, truncated, info

    def _mask(self, info: Dict) -> np.ndarray:
        mask = info.get("legal_action_mask")
        if mask is not None:
            return mask
        base = self.env.unwrapped
        return base._action_encoder.build_legal_mask(base.get_legal_actions())


class RecordEpisodeStatistics(Wrapper):
    """
    回合结束时写入 info["episode"]

    r: 累计奖励, l: 步数, invalid: 非法动作次数, winner, cards_eaten
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self._return = 0.0
        self._length = 0
        self._invalid = 0

    def reset(self, **kwargs):
        self._return, self._length, self._invalid = 0.0, 0, 0
        return self.env.reset(**kwargs)

    def step(self, action):
        obs, reward, terminated, truncated, info = self.env.step(action)
        self._return += float(reward)
        self._length += 1
        if "error" in info:
            self._invalid += 1

        if terminated or truncated:
            info["episode"] = {
                "r": self._return,
                "l": self._length,
                "invalid": self._invalid,
                "winner": info.get("winner"),
                "cards_eaten": info.get("cards_eaten"),
            }
        return obs, reward, terminated, truncated, info


def wrap_env(
    env: gym.Env,
    flatten_obs: bool = False,
    action_mask: bool = True,
    record_stats: bool = True,
    max_episode_steps: Optional[int] = None,
) -> gym.Env:
    """
    组合常用包装器

    Args:
        env: QuatchEnv 实例
        flatten_obs: 是否展平观测
        action_mask: 是否在 info 中加入 action_mask
        record_stats: 是否记录回合统计
        max_episode_steps: 额外的步数上限 (gymnasium TimeLimit)

    Returns:
        包装后的环境
    """
    if max_episode_steps is not None:
        env = gym.wrappers.TimeLimit(env, max_episode_steps=max_episode_steps)
    if record_stats:
        env = RecordEpisodeStatistics(env)
    if action_mask:
        env = LegalActionMaskWrapper(env)
    if flatten_obs:
        env = FlattenObservationWrapper(env)
    return env
