"""Gymnasium environments for Reverse Tetris."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="ReverseTetris-10x20-v0",
    entry_point="reverse_tetris.env.reverse_tetris_env:ReverseTetrisEnv",
)

__all__ = ["ReverseTetris-10x20-v0"]
