#!/usr/bin/env python3
"""Play snake in the terminal.

Steer with WASD or the arrow keys, quit with q. The terminal runs in raw
mode, so Ctrl-C arrives as an ordinary key and is ignored; only q or an
external SIGINT/SIGTERM (e.g. `kill -INT`) ends the game early.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys

from game.engine import SnakeGame
from game.renderer import Renderer
from game.state import GameState
from runtime.config import Settings, configure_logging, load_settings
from runtime.scheduler import run_game
from terminal.console import StdinSource, TerminalError, raw_terminal

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Terminal snake game")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML settings file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (logs are written only when a log file is set)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write logs to this file",
    )
    return parser.parse_args(argv)


async def play(settings: Settings) -> GameState:
    """Run one game on stdin/stdout with the fixed board and tick rate."""
    game = SnakeGame(
        width=settings.width,
        height=settings.height,
        rng=random.Random(settings.seed),
    )
    return await run_game(
        game,
        StdinSource(),
        Renderer(sys.stdout),
        tick_interval=settings.tick_interval,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            log_level=args.log_level,
            log_file=args.log_file,
        )
        configure_logging(settings)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        with raw_terminal():
            state = asyncio.run(play(settings))
    except TerminalError as e:
        logger.error("Startup failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Final Score: {state.score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
