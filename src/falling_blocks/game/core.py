from __future__ import annotations

import functools
import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Optional, Tuple, Union

from .grid import construct_grid, find_full_rows_of_grid, grid_positions_from_state
from .rng import RandomPair, scale_to_range
from .rules import DEFAULT_CONFIG, DEFAULT_RULES, GameConfig
from .shapes import (
    Shape,
    create_obstacle,
    create_shape,
    fixed_cells,
    rotate_kick_shape,
    update_state_with_new_shape,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stats:
    level: int = 1
    score: int = 0
    high_score: int = 0


@dataclass(frozen=True)
class State:
    next_shape: Shape
    game_end: bool = False
    current_shape: Optional[Shape] = None
    fixed_shapes: Tuple[Shape, ...] = ()
    stats: Stats = field(default_factory=Stats)
    drop_rate: int = DEFAULT_CONFIG.block_height
    obstacles: Tuple[Shape, ...] = ()
    level_up: bool = False
    config: GameConfig = DEFAULT_CONFIG


def initial_state(config: GameConfig = DEFAULT_CONFIG) -> State:
    px, py = config.spawn_preview
    return State(
        next_shape=replace(create_shape((0, 0), 1, config), x=px, y=py),
        drop_rate=config.block_height,
        config=config,
    )


INITIAL_STATE = initial_state()


# Actions. The set is closed: apply_action handles every class below.


@dataclass(frozen=True)
class Move:
    dx: int
    dy: int


@dataclass(frozen=True)
class Rotate:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Score:
    pass


@dataclass(frozen=True)
class CheckLevelUp:
    pass


@dataclass(frozen=True)
class EndGame:
    pass


@dataclass(frozen=True)
class RestartGame:
    pass


@dataclass(frozen=True)
class AddShape:
    random_pair: RandomPair


@dataclass(frozen=True)
class NextLevel:
    random_pair: RandomPair


@dataclass(frozen=True)
class GameCycle:
    random_pair: RandomPair


Action = Union[Move, Rotate, Tick, Score, CheckLevelUp, EndGame, RestartGame, AddShape, NextLevel, GameCycle]


def apply_action(s: State, action: Action) -> State:
    match action:
        case Move(dx=dx, dy=dy):
            return _move(s, dx, dy)
        case Rotate():
            return _rotate(s)
        case Tick():
            return _tick(s)
        case Score():
            return _score(s)
        case CheckLevelUp():
            return _check_level_up(s)
        case EndGame():
            return _end_game(s)
        case RestartGame():
            return _restart_game(s)
        case AddShape(random_pair=pair):
            return _add_shape(s, pair)
        case NextLevel(random_pair=pair):
            return _next_level(s, pair)
        case GameCycle(random_pair=pair):
            return _game_cycle(s, pair)
    raise TypeError(f"unknown action: {action!r}")


def reduce_actions(actions: Iterable[Action], state: State = INITIAL_STATE) -> State:
    return functools.reduce(apply_action, actions, state)


def scan_states(actions: Iterable[Action], state: State = INITIAL_STATE) -> Iterator[State]:
    """Yield the state after every action (the initial state is not repeated)."""
    return itertools.islice(itertools.accumulate(actions, apply_action, initial=state), 1, None)


def _move(s: State, dx: int, dy: int) -> State:
    if s.current_shape is None:
        return s
    shape = s.current_shape
    return update_state_with_new_shape(s, replace(shape, x=shape.x + dx, y=shape.y + dy))


def _rotate(s: State) -> State:
    if s.current_shape is None:
        return s
    shape = s.current_shape
    rotated = rotate_kick_shape(replace(shape, angle=(shape.angle + 90) % 360), s.config.canvas_width)
    return update_state_with_new_shape(s, rotated)


def _tick(s: State) -> State:
    if s.game_end or s.level_up:
        return s
    return reduce_actions([CheckLevelUp(), Move(0, s.drop_rate), Score(), EndGame()], s)


def _score(s: State) -> State:
    cfg = s.config
    grid = construct_grid(cfg.grid_width, cfg.grid_height, grid_positions_from_state(s))
    cleared = [row * cfg.block_height for row in find_full_rows_of_grid(grid)]
    if not cleared:
        return s

    def settle(shape: Shape) -> Shape:
        blocks = tuple(
            replace(b, y=b.y + b.height * sum(1 for row_y in cleared if row_y > b.y))
            for b in shape.blocks
            if b.y not in cleared
        )
        return replace(shape, blocks=blocks)

    fixed_shapes = tuple(settle(shape) for shape in s.fixed_shapes)
    by_id = {shape.id: shape for shape in fixed_shapes}
    obstacles = tuple(by_id.get(o.id, o) for o in s.obstacles)
    gained = DEFAULT_RULES.score_for_rows(len(cleared), s.stats.level)
    logger.debug("cleared %d row(s) at y=%s, +%d points", len(cleared), cleared, gained)
    return replace(
        s,
        fixed_shapes=fixed_shapes,
        obstacles=obstacles,
        stats=replace(s.stats, score=s.stats.score + gained),
    )


def _check_level_up(s: State) -> State:
    level_up = DEFAULT_RULES.is_level_up(s.stats.score, s.stats.level)
    if level_up and not s.level_up:
        logger.info("level %d complete with score %d", s.stats.level, s.stats.score)
    return replace(s, level_up=level_up)


def _end_game(s: State) -> State:
    shape = s.current_shape
    if shape is None:
        return s
    # The shape never dropped out of the spawn row
    game_end = shape.y - shape.block_height < s.config.spawn_canvas[1]
    if game_end and not s.game_end:
        logger.info("game over: level %d, score %d", s.stats.level, s.stats.score)
    return replace(s, game_end=game_end)


def _restart_game(s: State) -> State:
    if not s.game_end:
        return s
    score, high_score = s.stats.score, s.stats.high_score
    logger.info("restarting, high score %d", max(high_score, score))
    return replace(
        initial_state(s.config),
        stats=Stats(level=1, score=0, high_score=max(high_score, score)),
    )


def _next_shape_id(s: State) -> int:
    # shape ids do not count obstacles; 1 is the initial next shape
    candidate = len(s.fixed_shapes) - len(s.obstacles) + 2
    return max(candidate, s.next_shape.number + 1)


def _add_shape(s: State, pair: RandomPair) -> State:
    cfg = s.config
    sx, sy = cfg.spawn_canvas
    px, py = cfg.spawn_preview
    new_shape = create_shape(pair, _next_shape_id(s), cfg)
    return replace(
        s,
        current_shape=replace(s.next_shape, x=sx, y=sy),
        next_shape=replace(new_shape, x=px, y=py),
    )


def _obstacle_cell(s: State, obstacles: Tuple[Shape, ...], pair: RandomPair) -> Tuple[int, int]:
    """Pick an obstacle cell in the lower half of the grid.

    An occupied pick moves to the next free cell (row-major, wrapping within
    the lower half).
    """
    cfg = s.config
    top = cfg.grid_height // 2
    x = scale_to_range(pair[0], 0, cfg.grid_width - 1)
    y = scale_to_range(pair[1], top, cfg.grid_height - 1)
    occupied = fixed_cells(obstacles)
    rows = cfg.grid_height - top
    start = (y - top) * cfg.grid_width + x
    for offset in range(rows * cfg.grid_width):
        idx = (start + offset) % (rows * cfg.grid_width)
        cx, cy = idx % cfg.grid_width, top + idx // cfg.grid_width
        if (cx * cfg.block_width, cy * cfg.block_height) not in occupied:
            return cx, cy
    return x, y


def _next_level(s: State, pair: RandomPair) -> State:
    if not s.level_up:
        return s
    cfg = s.config
    # row clears trim obstacle blocks but never move an obstacle's origin
    previous = tuple(create_obstacle(o.number, o.x, o.y, cfg) for o in s.obstacles)
    gx, gy = _obstacle_cell(s, previous, pair)
    obstacle_id = min([o.number for o in previous] + [0]) - 1
    obstacle = create_obstacle(obstacle_id, gx * cfg.block_width, gy * cfg.block_height, cfg)
    obstacles = previous + (obstacle,)
    level = s.stats.level + 1
    logger.info("entering level %d with %d obstacle(s)", level, len(obstacles))
    return replace(
        initial_state(cfg),
        stats=replace(s.stats, level=level),
        fixed_shapes=obstacles,
        obstacles=obstacles,
    )


def _game_cycle(s: State, pair: RandomPair) -> State:
    if s.level_up:
        return _next_level(s, pair)
    if s.game_end:
        return _restart_game(s)
    return _add_shape(s, pair)
