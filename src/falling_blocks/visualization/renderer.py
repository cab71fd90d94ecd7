from __future__ import annotations

from typing import Iterable

import pygame

from falling_blocks.game.core import State
from falling_blocks.game.shapes import Shape
from .colors import BACKGROUND, color_for


class Renderer:
    """Draws state snapshots: board on the left, preview and stats on the right."""

    def __init__(self, margin: int = 20, font_size: int = 24) -> None:
        self.margin = margin
        self.font_size = font_size
        self._font = None

    def window_size(self, state: State) -> tuple[int, int]:
        cfg = state.config
        width = self.margin * 3 + cfg.canvas_width + cfg.preview_width
        height = self.margin * 2 + cfg.canvas_height
        return width, height

    def _draw_shapes(self, surf: pygame.Surface, shapes: Iterable[Shape]) -> None:
        for shape in shapes:
            color = color_for(shape.type.color)
            for b in shape.blocks:
                rect = pygame.Rect(b.x, b.y, b.width - 1, b.height - 1)
                pygame.draw.rect(surf, color, rect)

    def board_surface(self, state: State) -> pygame.Surface:
        cfg = state.config
        surf = pygame.Surface((cfg.canvas_width, cfg.canvas_height))
        surf.fill(BACKGROUND)
        self._draw_shapes(surf, state.fixed_shapes)
        if state.current_shape is not None:
            self._draw_shapes(surf, [state.current_shape])
        return surf

    def preview_surface(self, state: State) -> pygame.Surface:
        cfg = state.config
        surf = pygame.Surface((cfg.preview_width, cfg.preview_height))
        surf.fill(BACKGROUND)
        self._draw_shapes(surf, [state.next_shape])
        return surf

    def draw(self, screen: pygame.Surface, state: State) -> None:
        cfg = state.config
        if self._font is None:
            self._font = pygame.font.SysFont(None, self.font_size)
        screen.fill((10, 10, 14))
        screen.blit(self.board_surface(state), (self.margin, self.margin))
        side_x = self.margin * 2 + cfg.canvas_width
        screen.blit(self.preview_surface(state), (side_x, self.margin))

        stats = state.stats
        lines = [f"Level: {stats.level}", f"Score: {stats.score}", f"High Score: {stats.high_score}"]
        if state.level_up:
            lines.append("Level up!")
        if state.game_end:
            lines.append("Game Over")
        y = self.margin * 2 + cfg.preview_height
        for line in lines:
            txt = self._font.render(line, True, (230, 230, 230))
            screen.blit(txt, (side_x, y))
            y += self.font_size
        pygame.display.flip()
