"""Game module for Reverse Tetris.

Exports the puzzle engine:
- GameGrid: Board storage and random fill
- OfferedShape, ShapeType: Shape catalog and offered inventory
- can_place, apply_removal, repopulate, is_terminal: Placement rules
- GameSession: State machine driving a play-through
"""

from .grid import Cell, GameGrid, DEFAULT_PALETTE, create_random_grid
from .pieces import BASE_SHAPES, OfferedShape, ShapeType, draw_shapes, make_offered_shape
from .rules import (
    InvalidPlacement,
    RemovalResult,
    RepopulationResult,
    apply_removal,
    can_place,
    is_terminal,
    legal_anchors,
    repopulate,
)
from .core import GameConfig, GameSession, GameStatus, SessionState

__all__ = [
    "Cell",
    "GameGrid",
    "DEFAULT_PALETTE",
    "create_random_grid",
    "BASE_SHAPES",
    "OfferedShape",
    "ShapeType",
    "draw_shapes",
    "make_offered_shape",
    "InvalidPlacement",
    "RemovalResult",
    "RepopulationResult",
    "apply_removal",
    "can_place",
    "is_terminal",
    "legal_anchors",
    "repopulate",
    "GameConfig",
    "GameSession",
    "GameStatus",
    "SessionState",
]
