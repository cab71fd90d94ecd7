from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class GameConfig:
    """Board geometry and timing.

    All positions handled by the engine are canvas coordinates, i.e. integer
    multiples of the block size derived from the canvas and grid dimensions.
    """

    canvas_width: int = 200
    canvas_height: int = 400
    preview_width: int = 160
    preview_height: int = 80
    grid_width: int = 10
    grid_height: int = 20
    tick_rate_ms: int = 200
    cycle_ticks: int = 30
    seeds: Tuple[int, int] = (16012004, 19082004)

    def __post_init__(self) -> None:
        if self.grid_width <= 0 or self.grid_height < 2:
            raise ValueError("grid must be at least 1 column wide and 2 rows tall")
        if self.canvas_width % self.grid_width or self.canvas_height % self.grid_height:
            raise ValueError(
                f"canvas {self.canvas_width}x{self.canvas_height} does not divide "
                f"into a {self.grid_width}x{self.grid_height} grid"
            )
        if self.tick_rate_ms <= 0 or self.cycle_ticks <= 0:
            raise ValueError("tick rate and cycle length must be positive")

    @property
    def block_width(self) -> int:
        return self.canvas_width // self.grid_width

    @property
    def block_height(self) -> int:
        return self.canvas_height // self.grid_height

    @property
    def spawn_canvas(self) -> Tuple[int, int]:
        return self.canvas_width // 2 - 2 * self.block_width, 0

    @property
    def spawn_preview(self) -> Tuple[int, int]:
        return self.preview_width // 2 - 2 * self.block_width, 0

    @property
    def cycle_interval_ms(self) -> int:
        return self.tick_rate_ms * self.cycle_ticks


@dataclass(frozen=True)
class ScoringRules:
    level_step: int = 10

    def score_for_rows(self, rows: int, level: int) -> int:
        if rows <= 0:
            return 0
        return rows * level

    def level_up_threshold(self, level: int) -> int:
        return level * self.level_step

    def is_level_up(self, score: int, level: int) -> bool:
        return score >= self.level_up_threshold(level)


DEFAULT_CONFIG = GameConfig()
DEFAULT_RULES = ScoringRules()
