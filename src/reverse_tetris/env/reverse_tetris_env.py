from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from reverse_tetris.game import GameConfig, GameSession, ShapeType

# Default palette order: yellow, green, red, blue, purple, pink, orange
PALETTE_RGB = (
    (250, 204, 21),
    (34, 197, 94),
    (239, 68, 68),
    (59, 130, 246),
    (168, 85, 247),
    (236, 72, 153),
    (249, 115, 22),
)
EMPTY_RGB = (30, 30, 36)


def _compute_action_mask(game: GameSession) -> np.ndarray:
    cfg = game.config
    mask = np.zeros((cfg.offered_count, cfg.height, cfg.width), dtype=np.bool_)
    for idx, row, col in game.valid_actions():
        if idx < cfg.offered_count:
            mask[idx, row, col] = True
    return mask


class ReverseTetrisEnv(gym.Env):
    """Removal puzzle as a Gymnasium environment.

    Action ``(offered_idx, row, col)`` selects an offered shape and tries to
    remove it anchored at ``(row, col)``. The reward is the number of cells
    cleared, or ``invalid_action_penalty`` when nothing happened.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = GameSession(config)
        self.render_mode = render_mode

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        cfg = self.game.config
        k = cfg.offered_count

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(cfg.height, cfg.width), dtype=np.int8),
                "shapes": spaces.Box(low=-1, high=int(max(ShapeType)), shape=(k,), dtype=np.int8),
                "shapes_remaining": spaces.Discrete(k + 1),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, cfg.height, cfg.width))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.game.config.offered_count
        shapes = np.full((k,), -1, dtype=np.int8)
        for i, item in enumerate(self.game.offered[:k]):
            shapes[i] = int(item.kind)
        return {
            "grid": self.game.grid.filled.astype(np.int8),
            "shapes": shapes,
            "shapes_remaining": len(self.game.offered),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "valid_actions": self.game.valid_actions(),
            "score": self.game.score,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.new_game(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        idx, row, col = map(int, action)

        score_before = self.game.score
        if 0 <= idx < len(self.game.offered):
            self.game.select_shape(self.game.offered[idx].id)
            self.game.attempt_placement(row, col)
        gained = self.game.score - score_before

        reward_components: Dict[str, float] = {}
        if gained > 0:
            reward_components["cells"] = float(gained)
        else:
            reward_components["invalid"] = self.invalid_action_penalty
        reward_components["step"] = self.step_penalty

        terminated = bool(self.game.game_over)
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(gained)
        return obs, float(sum(reward_components.values())), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.game.grid.clone_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                color = PALETTE_RGB[(v - 1) % len(PALETTE_RGB)] if v else EMPTY_RGB
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
