from __future__ import annotations

from typing import List

import numpy as np

from falling_blocks.game.core import State
from falling_blocks.game.grid import occupancy_grid


GLYPHS = {0: "·", 1: "█", -1: "▒", 2: "▓"}


def format_grid(grid: np.ndarray) -> str:
    return "\n".join("".join(GLYPHS.get(int(cell), "?") for cell in row) for row in grid)


def format_state(state: State) -> str:
    """Board with the falling shape (▒) and obstacles (▓), followed by stats."""
    cfg = state.config
    grid = occupancy_grid(state)
    for o in state.obstacles:
        for b in o.blocks:
            x, y = b.x // cfg.block_width, b.y // cfg.block_height
            if 0 <= x < cfg.grid_width and 0 <= y < cfg.grid_height:
                grid[y, x] = 2
    lines: List[str] = [format_grid(grid)]
    lines.append(f"next: {state.next_shape.type.name} ({state.next_shape.angle}°)")
    stats = state.stats
    lines.append(f"level {stats.level}  score {stats.score}  high {stats.high_score}")
    if state.level_up:
        lines.append("LEVEL UP")
    if state.game_end:
        lines.append("GAME OVER")
    return "\n".join(lines)
