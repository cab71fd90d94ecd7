from dataclasses import replace
from typing import Iterable, Optional, Sequence, Tuple

from falling_blocks.game import INITIAL_STATE, SHAPE_TYPES, Shape, State, Stats, create_obstacle


def shape_type(name: str):
    return next(t for t in SHAPE_TYPES if t.name == name)


def make_shape(name: str, x: int, y: int, angle: int = 0, number: int = 1) -> Shape:
    return Shape(id=f"shape{number}", x=x, y=y, angle=angle, type=shape_type(name))


def obstacles_at(cells: Iterable[Tuple[int, int]], first_id: int = -1) -> Tuple[Shape, ...]:
    return tuple(create_obstacle(first_id - i, x, y) for i, (x, y) in enumerate(cells))


def make_state(
    current: Optional[Shape] = None,
    fixed: Sequence[Shape] = (),
    obstacles: Sequence[Shape] = (),
    stats: Optional[Stats] = None,
    **changes,
) -> State:
    return replace(
        INITIAL_STATE,
        current_shape=current,
        fixed_shapes=tuple(fixed),
        obstacles=tuple(obstacles),
        stats=stats or Stats(),
        **changes,
    )


def all_fixed_cells(state: State):
    return [(b.x, b.y) for shape in state.fixed_shapes for b in shape.blocks]
