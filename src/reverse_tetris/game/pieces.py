from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Sequence, Set, Tuple

import numpy as np

from .grid import DEFAULT_PALETTE


class ShapeType(IntEnum):
    MONO = 0
    I = 1
    O = 2
    T = 3
    L = 4
    J = 5
    S = 6
    Z = 7


Shape = np.ndarray


def _frozen(rows: List[List[int]]) -> Shape:
    shape = np.array(rows, dtype=np.int8)
    shape.setflags(write=False)
    return shape


# Single canonical orientation each; shapes never rotate.
BASE_SHAPES: Dict[ShapeType, Shape] = {
    ShapeType.MONO: _frozen([[1]]),
    ShapeType.I: _frozen([[1, 1, 1, 1]]),
    ShapeType.O: _frozen([[1, 1], [1, 1]]),
    ShapeType.T: _frozen([[1, 1, 1], [0, 1, 0]]),
    ShapeType.L: _frozen([[1, 1, 1], [1, 0, 0]]),
    ShapeType.J: _frozen([[1, 1, 1], [0, 0, 1]]),
    ShapeType.S: _frozen([[1, 1, 0], [0, 1, 1]]),
    ShapeType.Z: _frozen([[0, 1, 1], [1, 1, 0]]),
}

ID_LENGTH = 9


@dataclass(frozen=True, eq=False)
class OfferedShape:
    """A shape on offer to the player.

    Two offered shapes with the same kind and color are still distinct; the
    session always matches them by ``id``.
    """

    id: str
    kind: ShapeType
    shape: Shape
    color: str

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self.shape))

    def cells(self) -> List[Tuple[int, int]]:
        """Offsets ``(row, col)`` of the 1-cells relative to the anchor."""
        return [(int(r), int(c)) for r, c in np.argwhere(self.shape)]


def make_offered_shape(shape_id: str, kind: ShapeType, color: str) -> OfferedShape:
    return OfferedShape(id=shape_id, kind=kind, shape=BASE_SHAPES[kind], color=color)


def _new_id(rng: random.Random, taken: Set[str]) -> str:
    while True:
        shape_id = f"{rng.getrandbits(4 * ID_LENGTH):0{ID_LENGTH}x}"
        if shape_id not in taken:
            return shape_id


def draw_shapes(
    count: int,
    rng: random.Random,
    catalog: Sequence[ShapeType] = tuple(ShapeType),
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> List[OfferedShape]:
    if not catalog:
        raise ValueError("Shape catalog is empty")
    if not palette:
        raise ValueError("Color palette is empty")
    drawn: List[OfferedShape] = []
    taken: Set[str] = set()
    for _ in range(count):
        kind = rng.choice(list(catalog))
        color = rng.choice(list(palette))
        shape_id = _new_id(rng, taken)
        taken.add(shape_id)
        drawn.append(make_offered_shape(shape_id, kind, color))
    return drawn
