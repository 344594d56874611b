from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logger(*, name: str = "reverse_tetris", level: str = "info") -> logging.Logger:
    """Attach a single rich handler to ``name`` and return the logger."""
    logger = logging.getLogger(str(name))
    logger.handlers.clear()
    logger.propagate = False

    lvl = getattr(logging, str(level).upper(), logging.INFO)
    logger.setLevel(lvl)

    handler = RichHandler(
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["setup_logger"]
