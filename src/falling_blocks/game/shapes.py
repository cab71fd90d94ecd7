from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Set, Tuple

import numpy as np

from .rng import scale_to_range
from .rules import DEFAULT_CONFIG, GameConfig

if TYPE_CHECKING:
    from .core import State


Matrix = Tuple[Tuple[int, ...], ...]
Cell = Tuple[int, int]


def rotate_matrix(matrix: Matrix, times: int = 1) -> Matrix:
    """Rotate a matrix clockwise `times` quarter turns."""
    k = times % 4
    arr = np.asarray(matrix, dtype=np.int8)
    if k:
        arr = np.rot90(arr, k, axes=(1, 0))  # rotate clockwise when k>0
    return tuple(tuple(int(v) for v in row) for row in arr)


@dataclass(frozen=True)
class ShapeType:
    name: str
    matrix: Matrix
    color: str


@dataclass(frozen=True)
class SingleBlock:
    x: int
    y: int
    width: int
    height: int


SHAPE_TYPES: Tuple[ShapeType, ...] = (
    ShapeType("O", ((0, 0, 0, 0), (0, 1, 1, 0), (0, 1, 1, 0), (0, 0, 0, 0)), "green"),
    ShapeType("L", ((1, 0, 0), (1, 1, 1), (0, 0, 0)), "blue"),
    ShapeType("J", ((0, 0, 1), (1, 1, 1), (0, 0, 0)), "pink"),
    ShapeType("S", ((0, 0, 0), (0, 1, 1), (1, 1, 0)), "red"),
    ShapeType("Z", ((0, 0, 0), (1, 1, 0), (0, 1, 1)), "purple"),
    ShapeType("I", ((0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 1, 0)), "orange"),
    ShapeType("T", ((0, 0, 0), (1, 1, 1), (0, 1, 0)), "yellow"),
)

OBSTACLE_TYPE = ShapeType("Obstacle", ((1,),), "grey")

SHAPE_ANGLES: Tuple[int, ...] = (0, 90, 180, 270)


@dataclass(frozen=True)
class Shape:
    """A tetromino (or obstacle) placed on the canvas.

    `blocks` is derived from (type, angle, x, y) on every construction, so
    `dataclasses.replace` never leaves it stale for a falling shape. A fixed
    shape keeps the blocks it is given: row clears trim and shift them.
    """

    id: str
    x: int
    y: int
    angle: int
    type: ShapeType
    fix: bool = False
    block_width: int = DEFAULT_CONFIG.block_width
    block_height: int = DEFAULT_CONFIG.block_height
    # None means "rasterize"; always a tuple after __post_init__
    blocks: Tuple[SingleBlock, ...] = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.angle not in SHAPE_ANGLES:
            raise ValueError(f"angle must be one of {SHAPE_ANGLES}, got {self.angle}")
        if self.blocks is None or not self.fix:
            object.__setattr__(self, "blocks", render_blocks_from_shape(self))
        else:
            object.__setattr__(self, "blocks", tuple(self.blocks))

    @property
    def width(self) -> int:
        return self.block_width * len(self.type.matrix[0])

    @property
    def height(self) -> int:
        return self.block_height * len(self.type.matrix)

    @property
    def number(self) -> int:
        return int(self.id.removeprefix("shape"))

    def cells(self) -> Set[Cell]:
        return {(b.x, b.y) for b in self.blocks}


def render_blocks_from_shape(shape: Shape) -> Tuple[SingleBlock, ...]:
    """Rasterize a shape's rotated matrix into absolute blocks."""
    rotated = np.asarray(rotate_matrix(shape.type.matrix, (shape.angle // 90) % 4))
    return tuple(
        SingleBlock(
            x=shape.x + int(col) * shape.block_width,
            y=shape.y + int(row) * shape.block_height,
            width=shape.block_width,
            height=shape.block_height,
        )
        for row, col in np.argwhere(rotated == 1)
    )


def create_shape(random_pair: Sequence[float], id: int = 0, config: GameConfig = DEFAULT_CONFIG) -> Shape:
    shape_type = SHAPE_TYPES[scale_to_range(random_pair[0], 0, len(SHAPE_TYPES) - 1)]
    angle = SHAPE_ANGLES[scale_to_range(random_pair[1], 0, len(SHAPE_ANGLES) - 1)]
    return Shape(
        id=f"shape{id}",
        x=0,
        y=0,
        angle=angle,
        type=shape_type,
        block_width=config.block_width,
        block_height=config.block_height,
    )


def create_obstacle(id: int, x: int, y: int, config: GameConfig = DEFAULT_CONFIG) -> Shape:
    """A settled 1x1 block. Obstacle ids are negative so they never clash with shapes."""
    if id >= 0:
        raise ValueError(f"obstacle id must be negative, got {id}")
    return Shape(
        id=f"shape{id}",
        x=x,
        y=y,
        angle=0,
        type=OBSTACLE_TYPE,
        fix=True,
        block_width=config.block_width,
        block_height=config.block_height,
    )


def fixed_cells(shapes: Iterable[Shape]) -> Set[Cell]:
    return {(b.x, b.y) for shape in shapes for b in shape.blocks}


def can_update(candidate: Shape, occupied: Set[Cell], config: GameConfig) -> bool:
    for b in candidate.blocks:
        if not (0 <= b.x < config.canvas_width and b.y < config.canvas_height):
            return False
        if (b.x, b.y) in occupied:
            return False
    return True


def is_fix(candidate: Shape, occupied: Set[Cell], config: GameConfig) -> bool:
    floor_y = config.canvas_height - candidate.block_height
    return any(
        (b.x, b.y + b.height) in occupied or b.y == floor_y
        for b in candidate.blocks
    )


def update_shape(state: "State", candidate: Shape) -> Optional[Shape]:
    """Validate a moved/rotated candidate against the board.

    Returns the candidate (with `fix` set when it comes to rest) or, when the
    candidate leaves the canvas or overlaps a fixed block, the state's current
    shape unchanged.
    """
    if candidate.fix:
        return state.current_shape
    occupied = fixed_cells(state.fixed_shapes)
    if not can_update(candidate, occupied, state.config):
        return state.current_shape
    return replace(candidate, fix=is_fix(candidate, occupied, state.config))


def update_state_with_new_shape(state: "State", candidate: Shape) -> "State":
    updated = update_shape(state, candidate)
    if state.game_end or updated is None or updated is state.current_shape:
        return state
    if updated.fix:
        return replace(
            state,
            current_shape=None,
            fixed_shapes=state.fixed_shapes + (updated,),
        )
    return replace(state, current_shape=updated)


def kick_shape_left_wall(shape: Shape) -> Shape:
    if not shape.blocks:
        return shape
    leftmost = min(b.x for b in shape.blocks)
    if leftmost <= shape.block_width:
        return replace(shape, x=0)
    return shape


def kick_shape_right_wall(shape: Shape, canvas_width: int = DEFAULT_CONFIG.canvas_width) -> Shape:
    if not shape.blocks:
        return shape
    rightmost = max(b.x for b in shape.blocks)
    if rightmost >= canvas_width - 2 * shape.block_width:
        return replace(shape, x=canvas_width - shape.width)
    return shape


def rotate_kick_shape(shape: Shape, canvas_width: int = DEFAULT_CONFIG.canvas_width) -> Shape:
    """Left-wall kick, then right-wall kick."""
    return kick_shape_right_wall(kick_shape_left_wall(shape), canvas_width)
