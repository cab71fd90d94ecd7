"""Timed action sources and their merge into a single ordered stream.

Every source yields ``(time_ms, action)`` in non-decreasing time order.
`merge_streams` interleaves them by time; simultaneous actions keep the order
in which their sources were passed.
"""

from __future__ import annotations

import heapq
import itertools
from enum import IntEnum
from typing import Iterable, Iterator, Optional, Tuple

from .core import Action, GameCycle, Move, Rotate, Tick
from .rng import random_pairs
from .rules import DEFAULT_CONFIG, GameConfig

TimedAction = Tuple[int, Action]


class Key(IntEnum):
    LEFT = 0
    RIGHT = 1
    DOWN = 2
    ROTATE = 3


def action_for_key(key: Key, config: GameConfig = DEFAULT_CONFIG) -> Action:
    if key == Key.LEFT:
        return Move(-config.block_width, 0)
    if key == Key.RIGHT:
        return Move(config.block_width, 0)
    if key == Key.DOWN:
        return Move(0, config.block_height)
    if key == Key.ROTATE:
        return Rotate()
    raise ValueError(f"unmapped key: {key!r}")


def ticks(interval_ms: int) -> Iterator[TimedAction]:
    for n in itertools.count(1):
        yield n * interval_ms, Tick()


def cycles(interval_ms: int, seeds: Tuple[int, int]) -> Iterator[TimedAction]:
    for n, pair in enumerate(random_pairs(seeds), start=1):
        yield n * interval_ms, GameCycle(pair)


def key_actions(events: Iterable[Tuple[int, Key]], config: GameConfig = DEFAULT_CONFIG) -> Iterator[TimedAction]:
    for time_ms, key in events:
        yield int(time_ms), action_for_key(Key(key), config)


def merge_streams(*sources: Iterable[TimedAction]) -> Iterator[TimedAction]:
    return heapq.merge(*sources, key=lambda item: item[0])


def action_stream(
    keys: Iterable[Tuple[int, Key]] = (),
    config: GameConfig = DEFAULT_CONFIG,
    until_ms: Optional[int] = None,
) -> Iterator[Action]:
    """Key presses, ticks and game cycles, merged in that priority order."""
    merged = merge_streams(
        key_actions(keys, config),
        ticks(config.tick_rate_ms),
        cycles(config.cycle_interval_ms, config.seeds),
    )
    if until_ms is not None:
        merged = itertools.takewhile(lambda item: item[0] <= until_ms, merged)
    return (action for _, action in merged)
