from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional

import numpy as np

if TYPE_CHECKING:
    from .core import State


@dataclass(frozen=True)
class GridPosition:
    x: int
    y: int


def construct_grid(width: int, height: int, positions: Optional[Iterable[GridPosition]] = None) -> np.ndarray:
    """Build a height x width occupancy grid.

    The grid uses 0 for empty cells and 1 for occupied cells. Positions outside
    the grid are ignored.
    """
    grid = np.zeros((int(height), int(width)), dtype=np.int8)
    for pos in positions or ():
        if 0 <= pos.x < width and 0 <= pos.y < height:
            grid[pos.y, pos.x] = 1
    return grid


def find_full_rows_of_grid(grid: np.ndarray) -> List[int]:
    full_rows = np.where(np.all(grid == 1, axis=1))[0]
    return [int(r) for r in full_rows]


def grid_positions_from_state(state: "State") -> List[GridPosition]:
    """Scale every fixed block down to its logical grid position."""
    bw = state.config.block_width
    bh = state.config.block_height
    return [
        GridPosition(b.x // bw, b.y // bh)
        for shape in state.fixed_shapes
        for b in shape.blocks
    ]


def occupancy_grid(state: "State", include_current: bool = True) -> np.ndarray:
    """Fixed blocks as 1, the falling shape overlaid as -1."""
    cfg = state.config
    grid = construct_grid(cfg.grid_width, cfg.grid_height, grid_positions_from_state(state))
    if include_current and state.current_shape is not None:
        for b in state.current_shape.blocks:
            x, y = b.x // cfg.block_width, b.y // cfg.block_height
            if 0 <= x < cfg.grid_width and 0 <= y < cfg.grid_height:
                # Use negative to indicate falling piece overlay
                grid[y, x] = -1
    return grid


def count_holes(grid: np.ndarray) -> int:
    holes = 0
    for x in range(grid.shape[1]):
        seen_block = False
        for cell in grid[:, x]:
            if cell > 0:
                seen_block = True
            elif seen_block:
                holes += 1
    return holes
