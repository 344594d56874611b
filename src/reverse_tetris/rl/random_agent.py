from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

import gymnasium as gym

import reverse_tetris.env  # noqa: F401

logger = logging.getLogger(__name__)


@dataclass
class RolloutSummary:
    episodes: int = 0
    steps: int = 0
    total_reward: float = 0.0
    scores: List[int] = field(default_factory=list)
    # score of the episode still running when the rollout stopped
    last_score: int = 0

    @property
    def mean_score(self) -> float:
        return sum(self.scores) / len(self.scores) if self.scores else 0.0


def run_random(steps: int = 200, seed: Optional[int] = None, env: Optional[gym.Env] = None) -> RolloutSummary:
    """Play uniformly random legal removals for ``steps`` environment steps."""
    rng = random.Random(seed)
    env = env if env is not None else gym.make("ReverseTetris-10x20-v0")
    summary = RolloutSummary()
    obs, info = env.reset(seed=seed)
    for _ in range(steps):
        valid = info.get("valid_actions", [])
        if valid:
            action = rng.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        summary.steps += 1
        summary.total_reward += float(reward)
        if terminated or truncated:
            summary.episodes += 1
            summary.scores.append(int(info["score"]))
            logger.info("Episode %d finished with score %d", summary.episodes, info["score"])
            obs, info = env.reset()
    summary.last_score = int(info["score"])
    env.close()
    logger.info("Random agent total reward: %.2f over %d steps", summary.total_reward, summary.steps)
    return summary


if __name__ == "__main__":  # pragma: no cover
    run_random()
