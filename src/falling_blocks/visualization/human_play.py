from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional, Sequence

import pygame

from falling_blocks.game import GameConfig, GameCycle, Key, Tick, action_for_key, apply_action, initial_state, random_pairs
from .renderer import Renderer


KEY_TO_CONTROL: Dict[int, Key] = {
    pygame.K_a: Key.LEFT,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_d: Key.RIGHT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_s: Key.DOWN,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_SPACE: Key.ROTATE,
    pygame.K_UP: Key.ROTATE,
}

TICK_EVENT = pygame.USEREVENT + 1
CYCLE_EVENT = pygame.USEREVENT + 2


def run(config: Optional[GameConfig] = None) -> None:
    config = config or GameConfig()
    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer()
        state = initial_state(config)
        pairs = random_pairs(config.seeds)

        screen = pygame.display.set_mode(renderer.window_size(state))
        pygame.display.set_caption("Falling Blocks")
        pygame.time.set_timer(TICK_EVENT, config.tick_rate_ms)
        pygame.time.set_timer(CYCLE_EVENT, config.cycle_interval_ms)

        running = True
        while running:
            # pygame delivers events in arrival order: that is the action order
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_TO_CONTROL:
                        state = apply_action(state, action_for_key(KEY_TO_CONTROL[event.key], config))
                elif event.type == TICK_EVENT:
                    state = apply_action(state, Tick())
                elif event.type == CYCLE_EVENT:
                    state = apply_action(state, GameCycle(next(pairs)))

            renderer.draw(screen, state)
            clock.tick(60)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--tick-ms", type=int, default=GameConfig.tick_rate_ms)
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = p.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    run(GameConfig(tick_rate_ms=args.tick_ms))


if __name__ == "__main__":  # pragma: no cover
    main()
