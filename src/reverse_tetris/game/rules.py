from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, List

import numpy as np

from .grid import Coordinate, GameGrid
from .pieces import OfferedShape, Shape

logger = logging.getLogger(__name__)


class InvalidPlacement(ValueError):
    """Raised when a removal is applied at an anchor that fails ``can_place``."""


@dataclass
class RemovalResult:
    grid: GameGrid
    cells_cleared: int


@dataclass
class RepopulationResult:
    grid: GameGrid
    rows: List[int] = field(default_factory=list)
    columns: List[int] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.rows or self.columns)


def can_place(shape: Shape, row: int, col: int, grid: GameGrid) -> bool:
    """Whether ``shape`` anchored at ``(row, col)`` covers only in-bounds filled cells."""
    cells = np.argwhere(shape)
    if cells.size == 0:
        return grid.is_inside(row, col)
    rows = cells[:, 0] + row
    cols = cells[:, 1] + col
    if rows.min() < 0 or cols.min() < 0:
        return False
    if rows.max() >= grid.height or cols.max() >= grid.width:
        return False
    return bool(grid.filled[rows, cols].all())


def legal_anchors(shape: Shape, grid: GameGrid) -> List[Coordinate]:
    return [
        (row, col)
        for row in range(grid.height)
        for col in range(grid.width)
        if can_place(shape, row, col, grid)
    ]


def has_legal_anchor(shape: Shape, grid: GameGrid) -> bool:
    return any(
        can_place(shape, row, col, grid)
        for row in range(grid.height)
        for col in range(grid.width)
    )


def apply_removal(shape: Shape, row: int, col: int, grid: GameGrid) -> RemovalResult:
    """Clear the cells under ``shape`` and return a new grid.

    The input grid is left untouched. Colors of cleared cells are kept.
    """
    if not can_place(shape, row, col, grid):
        raise InvalidPlacement(f"Shape cannot be removed at anchor ({row}, {col})")
    new_grid = grid.copy()
    cells = np.argwhere(shape)
    new_grid.filled[cells[:, 0] + row, cells[:, 1] + col] = False
    cleared = int(cells.shape[0])
    logger.debug("Removed %d cells at (%d, %d)", cleared, row, col)
    return RemovalResult(grid=new_grid, cells_cleared=cleared)


def repopulate(grid: GameGrid, rng: random.Random, fill_probability: float) -> RepopulationResult:
    """Regenerate fully-empty rows, then fully-empty columns.

    Columns are judged against the grid after row regeneration, so the order
    of the two passes is observable and must stay rows first.
    """
    new_grid = grid.copy()
    result = RepopulationResult(grid=new_grid)
    for row in range(new_grid.height):
        if new_grid.row_is_empty(row):
            new_grid.refill_row(row, rng, fill_probability)
            result.rows.append(row)
    for col in range(new_grid.width):
        if new_grid.column_is_empty(col):
            new_grid.refill_column(col, rng, fill_probability)
            result.columns.append(col)
    if result.changed:
        logger.debug("Repopulated rows=%s columns=%s", result.rows, result.columns)
    return result


def is_terminal(offered: Iterable[OfferedShape], grid: GameGrid) -> bool:
    """True when no offered shape can be removed anywhere on ``grid``."""
    return not any(has_legal_anchor(item.shape, grid) for item in offered)
