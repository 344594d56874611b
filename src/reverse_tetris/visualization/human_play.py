from __future__ import annotations

import logging
from typing import Optional

import pygame

from reverse_tetris.game import GameConfig, GameSession
from .renderer import Renderer

logger = logging.getLogger(__name__)


def run(config: Optional[GameConfig] = None) -> None:
    game = GameSession(config)
    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer()
        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Reverse Tetris")
        font = pygame.font.SysFont(None, 26)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_n:
                        game.new_game()
                elif event.type == pygame.MOUSEMOTION:
                    cell = renderer.board_cell_at(game, event.pos)
                    if cell is None:
                        game.set_hover(None)
                    else:
                        game.set_hover(*cell)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    shape_id = renderer.shape_at(event.pos)
                    if shape_id is not None:
                        game.select_shape(shape_id)
                        continue
                    cell = renderer.board_cell_at(game, event.pos)
                    if cell is not None:
                        game.attempt_placement(*cell)

            renderer.draw(screen, game, font)
            clock.tick(60)
    finally:
        logger.info("Session closed with score %d", game.score)
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
