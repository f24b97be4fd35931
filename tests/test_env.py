from __future__ import annotations

import gymnasium as gym
import numpy as np
import pytest

import block_puzzle_search.env  # noqa: F401
from block_puzzle_search.env.placement_env import PlacementEnv, decode_action, encode_action
from block_puzzle_search.env.wrappers import ResampleInvalidActionWrapper
from block_puzzle_search.game import SINGLER, ShapeType, get_shape
from block_puzzle_search.runner import GameConfig


SQUARE3 = get_shape(ShapeType.SQUARE3)


def test_action_encoding_round_trip() -> None:
    for action in (0, 1, 63, 64, 100, 191):
        assert encode_action(*decode_action(action)) == action
    assert decode_action(65) == (1, 0, 1)


def test_registered_env_reset_and_step() -> None:
    env = gym.make("BlockPuzzleSearch-8x8-v0")
    obs, info = env.reset(seed=0)
    assert obs["grid"].shape == (8, 8)
    assert not obs["grid"].any()
    assert (obs["pieces"] >= 0).all()
    mask = info["action_mask"]
    assert mask.shape == (3 * 64,)
    assert mask.any()

    action = int(np.flatnonzero(mask)[0])
    obs, reward, terminated, truncated, info = env.step(action)
    assert reward >= 1.0
    assert info["score"] == reward
    assert obs["grid"].any()
    assert not terminated and not truncated
    env.close()


def test_reset_is_reproducible() -> None:
    first = PlacementEnv()
    second = PlacementEnv()
    obs_a, _ = first.reset(seed=11)
    obs_b, _ = second.reset(seed=11)
    assert np.array_equal(obs_a["pieces"], obs_b["pieces"])


def test_invalid_actions_are_penalized_and_do_nothing() -> None:
    env = PlacementEnv(config=GameConfig(batch_size=2), shape_pool=(SINGLER,))
    env.reset(seed=0)
    env.board.set_cell(0, 0)
    obs, reward, terminated, truncated, info = env.step(encode_action(0, 0, 0))
    assert reward == pytest.approx(-1.0)
    assert "invalid" in info["reward_components"]
    assert sorted(env.shapes) == [1, 2]
    assert env.board.filled_count == 1


def test_batch_refills_after_last_shape() -> None:
    env = PlacementEnv(config=GameConfig(batch_size=1), shape_pool=(SINGLER,))
    env.reset(seed=0)
    env.step(encode_action(0, 0, 0))
    assert list(env.shapes) == [1]
    assert env.board.filled_count == 1


def test_clearing_a_line_rewards_bonus() -> None:
    env = PlacementEnv(config=GameConfig(batch_size=1), shape_pool=(SINGLER,))
    env.reset(seed=0)
    for x in range(7):
        env.board.set_cell(x, 0)
    _, reward, _, _, info = env.step(encode_action(0, 7, 0))
    assert reward == pytest.approx(11.0)
    assert info["lines_cleared"] == 1


def test_truncates_after_max_rounds() -> None:
    env = PlacementEnv(config=GameConfig(batch_size=1, max_rounds=2), shape_pool=(SINGLER,))
    env.reset(seed=0)
    _, _, _, truncated, _ = env.step(0)
    assert not truncated
    _, _, _, truncated, _ = env.step(1)
    assert truncated


def test_resample_wrapper_replaces_invalid_actions() -> None:
    env = ResampleInvalidActionWrapper(PlacementEnv(config=GameConfig(batch_size=1), shape_pool=(SQUARE3,)))
    _, info = env.reset(seed=3)
    invalid = encode_action(0, 0, 7)  # a 3x3 anchored on the last row
    assert not info["action_mask"][invalid]
    _, reward, _, _, _ = env.step(invalid)
    assert reward == pytest.approx(9.0)
    assert env.get_action_mask().shape == (64,)


def test_render_modes() -> None:
    env = PlacementEnv(render_mode="ansi")
    env.reset(seed=0)
    text = env.render()
    assert text.startswith("  abcdefgh")
    env = PlacementEnv(render_mode="rgb_array")
    env.reset(seed=0)
    assert env.render().shape == (96, 96, 3)


def test_star_import_exports_nothing() -> None:
    namespace: dict = {}
    exec("from block_puzzle_search.env import *", namespace)
    assert "PlacementEnv" not in namespace


def test_resample_wrapper_needs_discrete_actions() -> None:
    with pytest.raises(TypeError):
        ResampleInvalidActionWrapper(gym.make("Pendulum-v1"))


def test_refill_before_reset_raises() -> None:
    env = PlacementEnv(config=GameConfig(batch_size=1), shape_pool=(SINGLER,))
    env.shapes = {}
    with pytest.raises(RuntimeError):
        env._refill()
