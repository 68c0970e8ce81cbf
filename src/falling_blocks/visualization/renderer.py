from __future__ import annotations

from typing import Iterable, Optional, Tuple

import pygame

from falling_blocks.game import Block, FallingBlockGame, Piece


RED = (255, 0, 0)
BLUE = (0, 0, 255)
BLACK = (0, 0, 0)
TEAL = (0, 149, 221)
BACKGROUND = (238, 238, 238)
BOARD = (255, 255, 255)

PANEL_CELLS = 6


def _color_for_block(block: Block) -> Tuple[int, int, int]:
    return BLUE if block.landed else RED


class Renderer:
    """Read-only pygame view of a game.

    Board pixels are multiplied by `scale`. The queued piece lives off-board,
    so it is drawn in a side panel relative to its own anchor.
    """

    def __init__(self, scale: int = 2, font: Optional[pygame.font.Font] = None) -> None:
        self.scale = scale
        self._font = font

    def window_size(self, game: FallingBlockGame) -> Tuple[int, int]:
        cfg = game.config
        return (cfg.canvas_width + PANEL_CELLS * cfg.cell_size) * self.scale, cfg.canvas_height * self.scale

    def _draw_block(self, surf: pygame.Surface, block: Block, x: int, y: int, cell: int) -> None:
        size = cell * self.scale
        rect = pygame.Rect(x * self.scale, y * self.scale, size, size)
        pygame.draw.rect(surf, _color_for_block(block), rect)
        pygame.draw.rect(surf, BLACK, rect, 1)

    def _draw_blocks(self, surf: pygame.Surface, blocks: Iterable[Block], cell: int) -> None:
        for block in blocks:
            self._draw_block(surf, block, block.x, block.y, cell)

    def _draw_preview(self, surf: pygame.Surface, piece: Piece, game: FallingBlockGame) -> None:
        cell = game.config.cell_size
        origin_x = game.config.canvas_width + cell
        origin_y = 6 * cell
        for block in piece.blocks:
            self._draw_block(surf, block, origin_x + block.x - piece.x, origin_y + block.y - piece.y, cell)

    def draw(self, screen: pygame.Surface, game: FallingBlockGame) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont("Arial", 8 * self.scale)
        cfg = game.config
        screen.fill(BACKGROUND)
        pygame.draw.rect(screen, BOARD, pygame.Rect(0, 0, cfg.board_width * self.scale, cfg.board_height * self.scale))

        # Locked blocks are read straight from the board cells
        self._draw_blocks(screen, game.board.occupied_blocks(), cfg.cell_size)
        self._draw_blocks(screen, game.active.blocks, cfg.cell_size)
        self._draw_preview(screen, game.queued, game)

        text = self._font.render(f"Score: {game.score}", True, TEAL)
        screen.blit(text, ((cfg.canvas_width + cfg.cell_size // 2) * self.scale, cfg.cell_size * self.scale // 2))
        pygame.display.flip()
