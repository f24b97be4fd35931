from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces


class ResampleInvalidActionWrapper(gym.Wrapper):
    """If a sampled action is invalid, resample uniformly among valid ones.

    Uses the ``action_mask`` of the most recent ``info``. Useful for agents
    that know nothing about legality, such as ``action_space.sample()``.
    """

    def __init__(self, env: gym.Env) -> None:
        super().__init__(env)
        if not isinstance(env.action_space, spaces.Discrete):
            raise TypeError("ResampleInvalidActionWrapper needs a Discrete action space")
        self._mask: np.ndarray | None = None

    def reset(self, **kwargs):  # type: ignore[override]
        obs, info = self.env.reset(**kwargs)
        self._mask = info.get("action_mask")
        return obs, info

    def step(self, action):  # type: ignore[override]
        mask = self._mask
        if mask is not None and 0 <= int(action) < mask.shape[0] and not bool(mask[int(action)]):
            valid_idxs = np.flatnonzero(mask)
            if valid_idxs.size > 0:
                action = int(self.np_random.choice(valid_idxs))
        obs, reward, terminated, truncated, info = self.env.step(action)
        self._mask = info.get("action_mask")
        return obs, reward, terminated, truncated, info

    def get_action_mask(self) -> np.ndarray:
        if self._mask is None:
            raise AttributeError("reset() must be called before get_action_mask()")
        return self._mask
