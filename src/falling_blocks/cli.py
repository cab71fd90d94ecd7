from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence, Tuple

from falling_blocks.game import GameConfig, Key, action_stream, initial_state, reduce_actions
from falling_blocks.visualization.text import format_state


def parse_keys(text: str) -> List[Tuple[int, Key]]:
    """Parse ``"200:left,400:rotate"`` into time-ordered key events."""
    events: List[Tuple[int, Key]] = []
    for item in filter(None, (part.strip() for part in text.split(","))):
        time_part, sep, key_part = item.partition(":")
        if not sep:
            raise ValueError(f"expected TIME:KEY, got {item!r}")
        try:
            key = Key[key_part.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown key {key_part!r}; choose from {[k.name.lower() for k in Key]}") from None
        events.append((int(time_part), key))
    return sorted(events, key=lambda e: e[0])


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run a headless falling-blocks game and print the final board.")
    p.add_argument("--ticks", type=int, default=300, help="number of ticks to simulate")
    p.add_argument("--seeds", type=int, nargs=2, metavar=("SEED1", "SEED2"), default=None)
    p.add_argument("--keys", type=str, default="", help="key presses as TIME_MS:KEY,... (left/right/down/rotate)")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        keys = parse_keys(args.keys)
    except ValueError as exc:
        parser.error(str(exc))
    if args.ticks < 0:
        parser.error("--ticks must be non-negative")

    config = GameConfig(seeds=tuple(args.seeds)) if args.seeds else GameConfig()
    until_ms = args.ticks * config.tick_rate_ms
    state = reduce_actions(action_stream(keys, config, until_ms), initial_state(config))
    print(format_state(state))


if __name__ == "__main__":  # pragma: no cover
    main()
