# tests/test_rules.py
from __future__ import annotations

import random

import numpy as np
import pytest

from reverse_tetris.game import (
    BASE_SHAPES,
    GameGrid,
    InvalidPlacement,
    ShapeType,
    apply_removal,
    can_place,
    is_terminal,
    legal_anchors,
    make_offered_shape,
    repopulate,
)

MONO = BASE_SHAPES[ShapeType.MONO]
O = BASE_SHAPES[ShapeType.O]
T = BASE_SHAPES[ShapeType.T]
I = BASE_SHAPES[ShapeType.I]
EMPTY_SHAPE = np.zeros((2, 2), dtype=np.int8)


def _brute_force_can_place(shape, row, col, grid) -> bool:
    for i in range(shape.shape[0]):
        for j in range(shape.shape[1]):
            if shape[i, j]:
                r, c = row + i, col + j
                if not (0 <= r < grid.height and 0 <= c < grid.width):
                    return False
                if not grid.filled[r, c]:
                    return False
    return True


def test_can_place_matches_cell_by_cell_definition() -> None:
    rng = random.Random(5)
    for _ in range(20):
        grid = GameGrid(6, 5)
        grid.filled[:, :] = np.array([[rng.random() < 0.7 for _ in range(6)] for _ in range(5)])
        for kind in ShapeType:
            shape = BASE_SHAPES[kind]
            for row in range(-1, 6):
                for col in range(-1, 7):
                    assert can_place(shape, row, col, grid) == _brute_force_can_place(shape, row, col, grid)


def test_can_place_rejects_out_of_bounds_coverage() -> None:
    grid = GameGrid.from_rows(["####", "####"])
    assert can_place(I, 0, 0, grid)
    assert not can_place(I, 0, 1, grid)
    assert not can_place(O, 1, 0, grid)
    assert not can_place(MONO, -1, 0, grid)


def test_can_place_ignores_zero_cells_of_the_shape() -> None:
    grid = GameGrid.from_rows(["###", "#.#"])
    # T only covers the middle of its second row
    assert not can_place(T, 0, 0, grid)
    grid = GameGrid.from_rows(["###", ".#."])
    assert can_place(T, 0, 0, grid)


def test_empty_shape_is_placeable_at_any_in_bounds_anchor() -> None:
    grid = GameGrid.from_rows(["..", ".."])
    assert can_place(EMPTY_SHAPE, 1, 1, grid)
    assert not can_place(EMPTY_SHAPE, 2, 0, grid)


def test_legal_anchors_on_full_2x2_board_for_o() -> None:
    grid = GameGrid.from_rows(["##", "##"])
    assert legal_anchors(O, grid) == [(0, 0)]


def test_apply_removal_clears_exactly_the_shape_cells() -> None:
    grid = GameGrid.from_rows(["####", "####", "####"])
    before = grid.filled_count()
    result = apply_removal(T, 1, 1, grid)
    assert result.cells_cleared == 4
    assert result.grid.filled_count() == before - 4
    assert result.grid.pretty() == "####\n#...\n##.#"


def test_apply_removal_does_not_mutate_input_and_keeps_colors() -> None:
    grid = GameGrid.from_rows(["##"])
    grid.colors[0, 0] = 2
    result = apply_removal(MONO, 0, 0, grid)
    assert grid.filled[0, 0]
    assert not result.grid.filled[0, 0]
    assert result.grid.colors[0, 0] == 2


def test_apply_removal_rejects_illegal_anchor() -> None:
    grid = GameGrid.from_rows(["#."])
    with pytest.raises(InvalidPlacement):
        apply_removal(MONO, 0, 1, grid)
    with pytest.raises(InvalidPlacement):
        apply_removal(O, 0, 0, grid)


def test_repopulate_leaves_non_empty_board_alone() -> None:
    grid = GameGrid.from_rows(["#.", ".#"])
    result = repopulate(grid, random.Random(0), 0.8)
    assert not result.changed
    assert np.array_equal(result.grid.filled, grid.filled)


def test_repopulate_refills_empty_row() -> None:
    grid = GameGrid.from_rows(["#.#", "...", ".#."])
    result = repopulate(grid, random.Random(0), 1.0)
    assert result.rows == [1]
    assert result.columns == []
    assert result.grid.filled[1].all()
    # input untouched
    assert grid.row_is_empty(1)


def test_repopulate_refills_empty_column() -> None:
    grid = GameGrid.from_rows(["#.", "#."])
    result = repopulate(grid, random.Random(0), 1.0)
    assert result.rows == []
    assert result.columns == [1]
    assert result.grid.filled.all()


def test_rows_are_regenerated_before_columns_are_judged() -> None:
    # Every row and column is empty. With a full refill, regenerating the
    # rows leaves no empty column behind.
    grid = GameGrid.from_rows(["..", ".."])
    result = repopulate(grid, random.Random(0), 1.0)
    assert result.rows == [0, 1]
    assert result.columns == []


def test_columns_still_regenerate_when_refilled_rows_stay_empty() -> None:
    grid = GameGrid.from_rows(["..", ".."])
    result = repopulate(grid, random.Random(0), 0.0)
    assert result.rows == [0, 1]
    assert result.columns == [0, 1]
    assert result.changed


def test_no_empty_line_after_full_refill() -> None:
    grid = GameGrid.from_rows(["#...", "....", "...."])
    result = repopulate(grid, random.Random(9), 1.0)
    for row in range(result.grid.height):
        assert not result.grid.row_is_empty(row)
    for col in range(result.grid.width):
        assert not result.grid.column_is_empty(col)


def test_is_terminal_on_full_and_empty_boards() -> None:
    offered = [make_offered_shape(f"id{k}", k, "red") for k in ShapeType]
    full = GameGrid.from_rows(["####"] * 4)
    empty = GameGrid.from_rows(["...."] * 4)
    assert not is_terminal(offered, full)
    for item in offered:
        assert is_terminal([item], empty)


def test_is_terminal_when_shapes_do_not_fit() -> None:
    grid = GameGrid.from_rows(["#.#", ".#.", "#.#"])
    assert is_terminal([make_offered_shape("o", ShapeType.O, "red")], grid)
    assert not is_terminal(
        [make_offered_shape("o", ShapeType.O, "red"), make_offered_shape("m", ShapeType.MONO, "red")],
        grid,
    )
