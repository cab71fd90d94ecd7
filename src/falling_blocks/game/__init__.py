"""Game module for falling-blocks.

Exports the pure engine and its supporting pieces:
- GameConfig / ScoringRules: board geometry, timing and scoring
- LCGStream / random_pairs: reproducible random numbers
- Shape / SingleBlock / ShapeType: shapes and their rasterized blocks
- construct_grid / find_full_rows_of_grid: logical occupancy grid
- State / apply_action / reduce_actions: the action reducer
- action_stream / Key: timed action sources
"""

from .rules import GameConfig, ScoringRules, DEFAULT_CONFIG
from .rng import LCGStream, hash_seed, random_pairs, scale, scale_to_range
from .shapes import (
    SHAPE_TYPES,
    Shape,
    ShapeType,
    SingleBlock,
    create_obstacle,
    create_shape,
    render_blocks_from_shape,
    rotate_kick_shape,
    rotate_matrix,
    update_shape,
)
from .grid import GridPosition, construct_grid, find_full_rows_of_grid, occupancy_grid
from .core import (
    INITIAL_STATE,
    Action,
    AddShape,
    CheckLevelUp,
    EndGame,
    GameCycle,
    Move,
    NextLevel,
    RestartGame,
    Rotate,
    Score,
    State,
    Stats,
    Tick,
    apply_action,
    initial_state,
    reduce_actions,
    scan_states,
)
from .streams import Key, action_for_key, action_stream, merge_streams

__all__ = [
    "GameConfig",
    "ScoringRules",
    "DEFAULT_CONFIG",
    "LCGStream",
    "hash_seed",
    "random_pairs",
    "scale",
    "scale_to_range",
    "SHAPE_TYPES",
    "Shape",
    "ShapeType",
    "SingleBlock",
    "create_obstacle",
    "create_shape",
    "render_blocks_from_shape",
    "rotate_kick_shape",
    "rotate_matrix",
    "update_shape",
    "GridPosition",
    "construct_grid",
    "find_full_rows_of_grid",
    "occupancy_grid",
    "INITIAL_STATE",
    "Action",
    "AddShape",
    "CheckLevelUp",
    "EndGame",
    "GameCycle",
    "Move",
    "NextLevel",
    "RestartGame",
    "Rotate",
    "Score",
    "State",
    "Stats",
    "Tick",
    "apply_action",
    "initial_state",
    "reduce_actions",
    "scan_states",
    "Key",
    "action_for_key",
    "action_stream",
    "merge_streams",
]
