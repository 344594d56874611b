from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np


Coordinate = Tuple[int, int]

DEFAULT_PALETTE: Tuple[str, ...] = (
    "yellow",
    "green",
    "red",
    "blue",
    "purple",
    "pink",
    "orange",
)


@dataclass(frozen=True)
class Cell:
    filled: bool
    color: str


class GameGrid:
    """Fixed-size board of filled/empty cells.

    Cells are stored as two parallel arrays indexed ``[row, col]``: a boolean
    ``filled`` mask and an ``int8`` index into ``palette``. A cell keeps its
    color after being emptied.
    """

    def __init__(self, width: int, height: int, palette: Sequence[str] = DEFAULT_PALETTE) -> None:
        self.width = int(width)
        self.height = int(height)
        self.palette = tuple(palette)
        self.filled = np.zeros((self.height, self.width), dtype=np.bool_)
        self.colors = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Iterable[Union[str, Sequence[int]]], palette: Sequence[str] = DEFAULT_PALETTE) -> "GameGrid":
        """Build a grid from 0/1 rows or strings such as ``"#.#"``."""
        parsed = []
        for row in rows:
            if isinstance(row, str):
                parsed.append([ch == "#" for ch in row])
            else:
                parsed.append([bool(v) for v in row])
        height = len(parsed)
        width = len(parsed[0]) if parsed else 0
        if any(len(r) != width for r in parsed):
            raise ValueError("All rows must have the same width")
        grid = cls(width, height, palette)
        if height and width:
            grid.filled[:, :] = np.array(parsed, dtype=np.bool_)
        return grid

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def cell(self, row: int, col: int) -> Cell:
        return Cell(filled=bool(self.filled[row, col]), color=self.palette[int(self.colors[row, col])])

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.filled))

    def row_is_empty(self, row: int) -> bool:
        return not self.filled[row, :].any()

    def column_is_empty(self, col: int) -> bool:
        return not self.filled[:, col].any()

    def _random_cell(self, rng: random.Random, fill_probability: float) -> Tuple[bool, int]:
        # Color is drawn even for empty cells so the draw sequence per cell is fixed.
        filled = rng.random() < fill_probability
        color = rng.randrange(len(self.palette))
        return filled, color

    def refill_row(self, row: int, rng: random.Random, fill_probability: float) -> None:
        for col in range(self.width):
            self.filled[row, col], self.colors[row, col] = self._random_cell(rng, fill_probability)

    def refill_column(self, col: int, rng: random.Random, fill_probability: float) -> None:
        for row in range(self.height):
            self.filled[row, col], self.colors[row, col] = self._random_cell(rng, fill_probability)

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.width, self.height, self.palette)
        new_grid.filled = self.filled.copy()
        new_grid.colors = self.colors.copy()
        return new_grid

    def clone_state(self) -> np.ndarray:
        """Return an int8 matrix: 0 for empty cells, palette index + 1 otherwise."""
        return np.where(self.filled, self.colors.astype(np.int8) + 1, 0).astype(np.int8)

    def pretty(self) -> str:
        return "\n".join("".join("#" if cell else "." for cell in row) for row in self.filled)

    def __repr__(self) -> str:
        return f"GameGrid(width={self.width}, height={self.height}, filled={self.filled_count()})"


def create_random_grid(
    width: int,
    height: int,
    fill_probability: float,
    palette: Sequence[str],
    rng: random.Random,
) -> GameGrid:
    """Fill every cell independently, row-major, with probability ``fill_probability``."""
    grid = GameGrid(width, height, palette)
    for row in range(grid.height):
        grid.refill_row(row, rng, fill_probability)
    return grid
