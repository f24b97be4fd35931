from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_puzzle_search.game import ALL_SHAPES, ANCHORS, BOARD_SIZE, Board, ScoringRules, Shape, ShapeBatch, shape_index
from block_puzzle_search.game.heuristics import get_board_features
from block_puzzle_search.runner import GameConfig, RandomBatchSupplier
from block_puzzle_search.visualization import format_batch, format_board


N_ANCHORS = len(ANCHORS)


def decode_action(action: int) -> Tuple[int, int, int]:
    """Flat action -> (slot, x, y). Slot ``i`` holds batch id ``i + 1``."""
    slot, anchor = divmod(int(action), N_ANCHORS)
    x, y = ANCHORS[anchor]
    return slot, x, y


def encode_action(slot: int, x: int, y: int) -> int:
    return slot * N_ANCHORS + ANCHORS.index((x, y))


class PlacementEnv(gym.Env):
    """One step places one shape of the current batch on the 8x8 board.

    Action ``slot * 64 + anchor``; anchors follow the search order (x outer,
    y inner). Reward is the engine's score gain, or ``invalid_action_penalty``
    when the placement does not apply. ``info["action_mask"]`` marks the
    legal actions.
    """

    metadata = {"render_modes": ["ansi", "rgb_array"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        render_mode: Optional[str] = None,
        invalid_action_penalty: float = -1.0,
        terminal_penalty: float = 0.0,
        shape_pool: Sequence[Shape] = ALL_SHAPES,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.shape_pool = tuple(shape_pool)

        k = self.config.batch_size
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(BOARD_SIZE, BOARD_SIZE), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=len(ALL_SHAPES) - 1, shape=(k,), dtype=np.int16),
            }
        )
        self.action_space = spaces.Discrete(k * N_ANCHORS)

        self.board = Board(self.rules)
        self.shapes: ShapeBatch = {}
        self.rounds = 0
        self._supplier: Optional[RandomBatchSupplier] = None

    def _refill(self) -> None:
        if self._supplier is None:
            raise RuntimeError("call reset() before stepping the environment")
        self.shapes = self._supplier()

    def _get_obs(self) -> Dict[str, Any]:
        pieces = np.full((self.config.batch_size,), -1, dtype=np.int16)
        for shape_id, shape in self.shapes.items():
            pieces[shape_id - 1] = shape_index(shape)
        return {"grid": self.board.grid.astype(np.int8), "pieces": pieces}

    def action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.bool_)
        for shape_id, shape in self.shapes.items():
            for x, y in self.board.valid_anchors(shape):
                mask[encode_action(shape_id - 1, x, y)] = True
        return mask

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": self.action_mask(),
            "score": self.board.score,
            "lines_cleared": self.board.lines_cleared,
            "rounds": self.rounds,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        self.board = Board(self.rules)
        self.rounds = 0
        self._supplier = RandomBatchSupplier(self.config.batch_size, self.shape_pool, rng=self.np_random)
        self._refill()
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        slot, x, y = decode_action(action)
        shape_id = slot + 1
        before = self.board.score
        reward_components: Dict[str, float] = {}

        shape = self.shapes.get(shape_id)
        success = shape is not None and self.board.place_at(shape, x, y)
        if success:
            del self.shapes[shape_id]
            reward_components["score"] = float(self.board.score - before)
            if not self.shapes:
                self._refill()
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        self.rounds += 1
        terminated = self.board.is_game_over(self.shapes.values())
        truncated = not terminated and self.rounds >= self.config.max_rounds
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        info = self._get_info()
        info["reward_components"] = reward_components
        info["features"] = get_board_features(self.board)
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def render(self):
        if self.render_mode == "ansi":
            return f"{format_board(self.board)}\n\n{format_batch(self.shapes)}\n"
        if self.render_mode == "rgb_array":
            cell = 12
            grid = self.board.grid
            img = np.zeros((BOARD_SIZE * cell, BOARD_SIZE * cell, 3), dtype=np.uint8)
            for y in range(BOARD_SIZE):
                for x in range(BOARD_SIZE):
                    color = (70, 200, 120) if grid[y, x] else (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None
