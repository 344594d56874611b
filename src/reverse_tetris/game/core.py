from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

from .grid import DEFAULT_PALETTE, Coordinate, GameGrid, create_random_grid
from .pieces import OfferedShape, ShapeType, draw_shapes
from .rules import apply_removal, can_place, is_terminal, legal_anchors, repopulate

logger = logging.getLogger(__name__)


class GameStatus(IntEnum):
    PLAYING = 0
    GAME_OVER = 1


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    fill_probability: float = 0.8
    offered_count: int = 3
    catalog: Tuple[ShapeType, ...] = tuple(ShapeType)
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        if not 0.0 <= self.fill_probability <= 1.0:
            raise ValueError(f"fill_probability must be within [0, 1], got {self.fill_probability}")
        if self.offered_count < 1:
            raise ValueError("offered_count must be at least 1")
        if not self.catalog:
            raise ValueError("Shape catalog is empty")
        if not self.palette:
            raise ValueError("Color palette is empty")
        # int8 color indices
        if len(self.palette) > 127:
            raise ValueError("Color palette is limited to 127 entries")


@dataclass(frozen=True)
class SessionState:
    """Snapshot handed back to the presentation layer after every operation."""

    grid: GameGrid
    offered: Tuple[OfferedShape, ...]
    selected_id: Optional[str]
    score: int
    status: GameStatus
    hover: Optional[Coordinate] = None

    @property
    def terminal(self) -> bool:
        return self.status == GameStatus.GAME_OVER


@dataclass
class _Counters:
    moves: int = 0
    cells_cleared: int = 0
    rows_repopulated: int = 0
    columns_repopulated: int = 0


class GameSession:
    """Owns the board, the offered shapes and the score of one play-through.

    Every mutation goes through ``new_game``, ``select_shape`` and
    ``attempt_placement``. Illegal player actions are ignored rather than
    reported.
    """

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height, self.config.palette)
        self.offered: List[OfferedShape] = []
        self.selected: Optional[OfferedShape] = None
        self.hover: Optional[Coordinate] = None
        self.score = 0
        self.status = GameStatus.PLAYING
        self._counters = _Counters()
        self.new_game()

    @property
    def game_over(self) -> bool:
        return self.status == GameStatus.GAME_OVER

    def new_game(self, seed: Optional[int] = None) -> SessionState:
        if seed is not None:
            self.rng.seed(seed)
        cfg = self.config
        self.grid = create_random_grid(cfg.width, cfg.height, cfg.fill_probability, cfg.palette, self.rng)
        self.offered = self._draw_offered()
        self.selected = None
        self.hover = None
        self.score = 0
        self.status = GameStatus.PLAYING
        self._counters = _Counters()
        logger.info("New game on %dx%d board, %d cells filled", cfg.width, cfg.height, self.grid.filled_count())
        self._update_status()
        return self.get_state()

    def _draw_offered(self) -> List[OfferedShape]:
        return draw_shapes(self.config.offered_count, self.rng, self.config.catalog, self.config.palette)

    def _find_offered(self, shape_id: str) -> Optional[OfferedShape]:
        for item in self.offered:
            if item.id == shape_id:
                return item
        return None

    def _update_status(self) -> None:
        if is_terminal(self.offered, self.grid):
            self.status = GameStatus.GAME_OVER
            self.selected = None
            logger.info("Game over: no legal removals left, final score %d", self.score)
        else:
            self.status = GameStatus.PLAYING

    def select_shape(self, shape_id: str) -> SessionState:
        if self.game_over:
            return self.get_state()
        item = self._find_offered(shape_id)
        if item is not None:
            self.selected = item
        return self.get_state()

    def set_hover(self, row: Optional[int], col: Optional[int] = None) -> bool:
        """Track the hovered cell; returns whether the selection is removable there."""
        if row is None or col is None:
            self.hover = None
            return False
        self.hover = (row, col)
        return self.hover_valid

    @property
    def hover_valid(self) -> bool:
        if self.hover is None or self.selected is None or self.game_over:
            return False
        return can_place(self.selected.shape, self.hover[0], self.hover[1], self.grid)

    def attempt_placement(self, row: int, col: int) -> SessionState:
        if self.game_over or self.selected is None:
            return self.get_state()
        chosen = self.selected
        if not can_place(chosen.shape, row, col, self.grid):
            return self.get_state()

        removal = apply_removal(chosen.shape, row, col, self.grid)
        self.score += removal.cells_cleared
        self.offered = [item for item in self.offered if item.id != chosen.id]
        if not self.offered:
            self.offered = self._draw_offered()
        self.selected = None
        self.hover = None

        refill = repopulate(removal.grid, self.rng, self.config.fill_probability)
        self.grid = refill.grid

        self._counters.moves += 1
        self._counters.cells_cleared += removal.cells_cleared
        self._counters.rows_repopulated += len(refill.rows)
        self._counters.columns_repopulated += len(refill.columns)

        self._update_status()
        return self.get_state()

    def legal_anchors(self, shape_id: str) -> List[Coordinate]:
        item = self._find_offered(shape_id)
        if item is None:
            return []
        return legal_anchors(item.shape, self.grid)

    def valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (offered_index, row, col) removals currently allowed."""
        if self.game_over:
            return []
        actions: List[Tuple[int, int, int]] = []
        for idx, item in enumerate(self.offered):
            for row, col in legal_anchors(item.shape, self.grid):
                actions.append((idx, row, col))
        return actions

    def get_state(self) -> SessionState:
        return SessionState(
            grid=self.grid.copy(),
            offered=tuple(self.offered),
            selected_id=self.selected.id if self.selected is not None else None,
            score=self.score,
            status=self.status,
            hover=self.hover,
        )

    def get_game_stats(self) -> dict:
        moves = self._counters.moves
        return {
            "final_score": self.score,
            "moves": moves,
            "cells_cleared": self._counters.cells_cleared,
            "rows_repopulated": self._counters.rows_repopulated,
            "columns_repopulated": self._counters.columns_repopulated,
            "fill_ratio": self.grid.filled_count() / float(self.grid.width * self.grid.height),
            "avg_cells_per_move": self._counters.cells_cleared / max(1, moves),
            "game_over": self.game_over,
        }
