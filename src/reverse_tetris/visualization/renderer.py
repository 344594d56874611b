from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import pygame

from reverse_tetris.game import GameSession


COLOR_RGB: Dict[str, Tuple[int, int, int]] = {
    "yellow": (250, 204, 21),
    "green": (34, 197, 94),
    "red": (239, 68, 68),
    "blue": (59, 130, 246),
    "purple": (168, 85, 247),
    "pink": (236, 72, 153),
    "orange": (249, 115, 22),
}
EMPTY_RGB = (17, 24, 39)
BACKGROUND_RGB = (10, 10, 14)
TEXT_RGB = (230, 230, 230)


def _rgb(color: str) -> Tuple[int, int, int]:
    return COLOR_RGB.get(color, (200, 200, 200))


class Renderer:
    """Draws the board, the offered shapes and the score.

    Keeps the screen rectangles of the board and of each offered shape so
    that mouse positions can be mapped back to engine coordinates.
    """

    def __init__(self, cell_size: int = 24, preview_cell: int = 16, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.preview_cell = preview_cell
        self.margin = margin
        self.shape_rects: List[Tuple[str, pygame.Rect]] = []

    def window_size(self, game: GameSession) -> Tuple[int, int]:
        board_w = game.grid.width * self.cell_size
        board_h = game.grid.height * self.cell_size
        panel_w = 6 * self.preview_cell + self.margin * 4
        return self.margin * 3 + board_w + panel_w, self.margin * 2 + board_h

    def board_cell_at(self, game: GameSession, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        col = (pos[0] - self.margin) // self.cell_size
        row = (pos[1] - self.margin) // self.cell_size
        if pos[0] < self.margin or pos[1] < self.margin or not game.grid.is_inside(row, col):
            return None
        return row, col

    def shape_at(self, pos: Tuple[int, int]) -> Optional[str]:
        for shape_id, rect in self.shape_rects:
            if rect.collidepoint(pos):
                return shape_id
        return None

    def _draw_board(self, screen: pygame.Surface, game: GameSession) -> None:
        grid = game.grid
        highlight = set()
        if game.hover_valid and game.selected is not None:
            r0, c0 = game.hover
            highlight = {(r0 + r, c0 + c) for r, c in game.selected.cells()}
        for row in range(grid.height):
            for col in range(grid.width):
                cell = grid.cell(row, col)
                color = _rgb(cell.color) if cell.filled else EMPTY_RGB
                if (row, col) in highlight:
                    color = tuple(c // 2 for c in color)
                rect = pygame.Rect(
                    self.margin + col * self.cell_size,
                    self.margin + row * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(screen, color, rect)

    def _draw_offered(self, screen: pygame.Surface, game: GameSession, font: pygame.font.Font) -> None:
        x0 = self.margin * 2 + game.grid.width * self.cell_size
        y = self.margin
        screen.blit(font.render(f"Score: {game.score}", True, TEXT_RGB), (x0, y))
        y += 40
        screen.blit(font.render("Available shapes:", True, TEXT_RGB), (x0, y))
        y += 30
        self.shape_rects = []
        for item in game.offered:
            h, w = item.shape.shape
            for r in range(h):
                for c in range(w):
                    color = _rgb(item.color) if item.shape[r, c] else EMPTY_RGB
                    rect = pygame.Rect(
                        x0 + c * self.preview_cell,
                        y + r * self.preview_cell,
                        self.preview_cell - 1,
                        self.preview_cell - 1,
                    )
                    pygame.draw.rect(screen, color, rect)
            outline = pygame.Rect(x0 - 4, y - 4, w * self.preview_cell + 8, h * self.preview_cell + 8)
            if game.selected is not None and game.selected.id == item.id:
                pygame.draw.rect(screen, (57, 255, 20), outline, 2)
            self.shape_rects.append((item.id, outline))
            y += h * self.preview_cell + 24
        screen.blit(font.render("N: new game", True, TEXT_RGB), (x0, y + 10))

    def draw(self, screen: pygame.Surface, game: GameSession, font: pygame.font.Font) -> None:
        screen.fill(BACKGROUND_RGB)
        self._draw_board(screen, game)
        self._draw_offered(screen, game, font)
        if game.game_over:
            text = font.render(f"Game Over! Final score: {game.score}", True, (255, 100, 100))
            screen.blit(text, (self.margin, 2))
        pygame.display.flip()
