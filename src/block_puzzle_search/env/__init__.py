"""Gymnasium environments for Block Puzzle Search."""

from __future__ import annotations

from gymnasium.envs.registration import register

# One shape placed per step, 3 * 64 discrete actions
register(
    id="BlockPuzzleSearch-8x8-v0",
    entry_point="block_puzzle_search.env.placement_env:PlacementEnv",
)

__all__: list = []
