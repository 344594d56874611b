from __future__ import annotations

import argparse
from typing import List, Optional

from reverse_tetris.game import GameConfig
from reverse_tetris.rl.train_ppo import add_arguments as add_train_arguments
from reverse_tetris.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="reverse-tetris", description="Clear the board one shape at a time.")
    p.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    sub = p.add_subparsers(dest="command", required=True)

    play = sub.add_parser("play", help="Open a pygame window and play")
    play.add_argument("--width", type=int, default=10)
    play.add_argument("--height", type=int, default=20)
    play.add_argument("--fill", type=float, default=0.8, help="Initial fill probability")
    play.add_argument("--seed", type=int, default=None)

    rnd = sub.add_parser("random", help="Run a random agent and report scores")
    rnd.add_argument("--steps", type=int, default=500)
    rnd.add_argument("--seed", type=int, default=None)

    train = sub.add_parser("train", help="Train a PPO agent (needs the 'rl' extra)")
    add_train_arguments(train)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger(name="reverse_tetris", level=args.log_level)

    if args.command == "play":
        from reverse_tetris.visualization.human_play import run

        run(GameConfig(width=args.width, height=args.height, fill_probability=args.fill, random_seed=args.seed))
    elif args.command == "random":
        from reverse_tetris.rl.random_agent import run_random

        summary = run_random(steps=args.steps, seed=args.seed)
        if summary.scores:
            logger.info(
                "Episodes finished: %d, mean score %.1f, best %d",
                summary.episodes,
                summary.mean_score,
                max(summary.scores),
            )
        else:
            logger.info("No episode finished within %d steps", summary.steps)
        logger.info("Unfinished episode score: %d", summary.last_score)
    elif args.command == "train":
        from reverse_tetris.rl.train_ppo import train as run_train

        run_train(args)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
