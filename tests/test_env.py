# tests/test_env.py
from __future__ import annotations

import numpy as np

from reverse_tetris.env.reverse_tetris_env import EMPTY_RGB, PALETTE_RGB, ReverseTetrisEnv
from reverse_tetris.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper
from reverse_tetris.game import GameConfig
from reverse_tetris.rl.random_agent import run_random


def _env(**kwargs) -> ReverseTetrisEnv:
    return ReverseTetrisEnv(GameConfig(width=6, height=8, random_seed=0), **kwargs)


def test_reset_observation_matches_spaces() -> None:
    env = _env()
    obs, info = env.reset(seed=3)
    assert env.observation_space.contains(obs)
    assert info["action_mask"].shape == (3, 8, 6)
    assert info["score"] == 0


def test_action_mask_agrees_with_valid_actions() -> None:
    env = _env()
    _, info = env.reset(seed=4)
    mask = info["action_mask"]
    assert int(mask.sum()) == len(info["valid_actions"])
    for idx, row, col in info["valid_actions"]:
        assert mask[idx, row, col]


def test_valid_step_rewards_cleared_cells() -> None:
    env = _env()
    _, info = env.reset(seed=5)
    idx, row, col = info["valid_actions"][0]
    expected = env.game.offered[idx].cell_count
    _, reward, _, _, info = env.step((idx, row, col))
    assert reward == float(expected)
    assert info["score"] == expected


def test_invalid_step_is_penalised_and_changes_nothing() -> None:
    env = _env(invalid_action_penalty=-0.5)
    _, info = env.reset(seed=6)
    mask = info["action_mask"]
    invalid = np.argwhere(~mask)[0]
    grid_before = env.game.grid.filled.copy()
    _, reward, _, _, info = env.step(tuple(int(v) for v in invalid))
    assert reward == -0.5
    assert info["score"] == 0
    assert np.array_equal(env.game.grid.filled, grid_before)


def test_truncates_after_max_steps() -> None:
    env = _env(max_episode_steps=1)
    env.reset(seed=7)
    _, _, _, truncated, _ = env.step((0, 0, 0))
    assert truncated


def test_flatten_wrapper_round_trips_indices() -> None:
    env = FlattenDiscreteActionWrapper(_env())
    env.reset(seed=8)
    assert env.action_space.n == 3 * 8 * 6
    assert env._unflatten(0) == (0, 0, 0)
    assert env._unflatten(6 * 8 + 6 + 2) == (1, 1, 2)
    assert env.get_action_mask().shape == (3 * 8 * 6,)


def test_resample_wrapper_replaces_invalid_actions() -> None:
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(_env()))
    env.reset(seed=9)
    mask = env.get_action_mask()
    invalid = int(np.flatnonzero(~mask)[0])
    _, reward, _, _, _ = env.step(invalid)
    assert reward > 0


def test_random_agent_counts_only_finished_episodes() -> None:
    env = _env(max_episode_steps=5)
    summary = run_random(steps=12, seed=1, env=env)
    assert summary.steps == 12
    assert summary.episodes >= 2
    assert len(summary.scores) == summary.episodes


def test_random_agent_keeps_unfinished_episode_out_of_scores() -> None:
    env = ReverseTetrisEnv(GameConfig(width=6, height=8, fill_probability=1.0, random_seed=0))
    summary = run_random(steps=3, seed=0, env=env)
    assert summary.episodes == 0
    assert summary.scores == []
    assert summary.mean_score == 0.0
    assert summary.last_score > 0


def test_info_steps_counts_every_step_while_session_counts_removals() -> None:
    env = _env()
    _, info = env.reset(seed=6)
    invalid = np.argwhere(~info["action_mask"])[0]
    _, _, _, _, info = env.step(tuple(int(v) for v in invalid))
    assert info["steps"] == 1
    assert env.game.get_game_stats()["moves"] == 0


def test_rgb_render_colours_filled_cells_by_palette() -> None:
    env = ReverseTetrisEnv(GameConfig(width=2, height=1, random_seed=0), render_mode="rgb_array")
    env.reset(seed=0)
    env.game.grid.filled[0, :] = [True, False]
    env.game.grid.colors[0, 0] = 3
    img = env.render()
    assert img.shape == (12, 24, 3)
    assert tuple(int(v) for v in img[0, 0]) == PALETTE_RGB[3]
    assert tuple(int(v) for v in img[0, 12]) == EMPTY_RGB


def test_render_without_rgb_mode_returns_nothing() -> None:
    env = _env()
    env.reset(seed=0)
    assert env.render() is None
