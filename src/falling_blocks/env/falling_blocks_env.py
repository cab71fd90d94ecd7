from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import (
    SHAPE_TYPES,
    GameConfig,
    GameCycle,
    Key,
    State,
    Tick,
    action_for_key,
    apply_action,
    initial_state,
    occupancy_grid,
    random_pairs,
)
from falling_blocks.game.grid import count_holes
from falling_blocks.game.rng import RandomPair
from falling_blocks.visualization.colors import BACKGROUND, color_for


SHAPE_INDEX = {shape_type.name: i for i, shape_type in enumerate(SHAPE_TYPES)}


class FallingBlocksEnv(gym.Env):
    """Falling-blocks engine as a gymnasium task.

    Actions (5 total):
      0: No key
      1: Move Left
      2: Move Right
      3: Move Down
      4: Rotate

    Every step applies the chosen key, then one tick; every `cycle_ticks`
    ticks a game cycle spawns the next shape (or advances the level). The
    reward is the score gained during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 5}

    ACT_NONE = 0
    ACT_LEFT = 1
    ACT_RIGHT = 2
    ACT_DOWN = 3
    ACT_ROTATE = 4

    _KEYS = {ACT_LEFT: Key.LEFT, ACT_RIGHT: Key.RIGHT, ACT_DOWN: Key.DOWN, ACT_ROTATE: Key.ROTATE}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: Optional[int] = None,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.max_episode_steps = max_episode_steps

        w, h = self.config.grid_width, self.config.grid_height
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-1, high=1, shape=(h, w), dtype=np.int8),
                "next_shape": spaces.Discrete(len(SHAPE_TYPES)),
                "stats": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(3,), dtype=np.int32),
            }
        )
        self.action_space = spaces.Discrete(5)

        self.state: State = initial_state(self.config)
        self._pairs: Optional[Iterator[RandomPair]] = None
        self._ticks = 0
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        stats = self.state.stats
        return {
            "board": occupancy_grid(self.state).astype(np.int8),
            "next_shape": SHAPE_INDEX[self.state.next_shape.type.name],
            "stats": np.array([stats.level, stats.score, stats.high_score], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        board = occupancy_grid(self.state, include_current=False)
        return {
            "level": self.state.stats.level,
            "score": self.state.stats.score,
            "ticks": self._ticks,
            "holes": count_holes(board),
            "level_up": self.state.level_up,
        }

    def _cycle(self) -> None:
        assert self._pairs is not None
        self.state = apply_action(self.state, GameCycle(next(self._pairs)))

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        seeds = self.config.seeds
        if seed is not None:
            # keep the default gap between the two streams
            seeds = (int(seed), int(seed) + seeds[1] - seeds[0])
        self._pairs = random_pairs(seeds)
        self.state = initial_state(self.config)
        self._ticks = 0
        self._steps = 0
        # spawn the first shape right away instead of idling for a full cycle
        self._cycle()
        return self._get_obs(), self._get_info()

    def step(self, action):
        if self._pairs is None:
            raise RuntimeError("call reset() before step()")
        action = int(action)
        score_before = self.state.stats.score

        key = self._KEYS.get(action)
        if key is not None:
            self.state = apply_action(self.state, action_for_key(key, self.config))
        self.state = apply_action(self.state, Tick())
        self._ticks += 1
        if self._ticks % self.config.cycle_ticks == 0:
            self._cycle()
        self._steps += 1

        reward = float(self.state.stats.score - score_before)
        terminated = bool(self.state.game_end)
        truncated = self.max_episode_steps is not None and self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, bool(truncated), self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        cfg = self.config
        img = np.zeros((cfg.canvas_height, cfg.canvas_width, 3), dtype=np.uint8)
        img[:, :] = BACKGROUND
        shapes = list(self.state.fixed_shapes)
        if self.state.current_shape is not None:
            shapes.append(self.state.current_shape)
        for shape in shapes:
            color = color_for(shape.type.color)
            for b in shape.blocks:
                if 0 <= b.y < cfg.canvas_height:
                    img[b.y : b.y + b.height - 1, b.x : b.x + b.width - 1, :] = color
        return img

    def close(self) -> None:
        pass
