"""Direction controller: turns logical key events into direction changes."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from game.state import OPPOSITE_DIRECTIONS, Direction, GameState
from terminal.keys import Arrow, KeyEvent

if TYPE_CHECKING:
    from runtime.mailbox import Mailbox

logger = logging.getLogger(__name__)

KEY_BINDINGS: dict[KeyEvent, Direction] = {
    "w": Direction.UP,
    "W": Direction.UP,
    Arrow.UP: Direction.UP,
    "s": Direction.DOWN,
    "S": Direction.DOWN,
    Arrow.DOWN: Direction.DOWN,
    "a": Direction.LEFT,
    "A": Direction.LEFT,
    Arrow.LEFT: Direction.LEFT,
    "d": Direction.RIGHT,
    "D": Direction.RIGHT,
    Arrow.RIGHT: Direction.RIGHT,
}

QUIT_KEYS = frozenset({"q", "Q"})


def apply_input(state: GameState, key: KeyEvent) -> None:
    """Apply one key to *state*.

    Direction keys change the direction used on the next tick unless they
    would reverse the snake onto itself. Quit keys end the game at once.
    Anything else is ignored. Callers hold the state lock.
    """
    if key in QUIT_KEYS:
        state.end("quit")
        logger.debug("Quit key pressed")
        return

    direction = KEY_BINDINGS.get(key)
    if direction is None:
        return

    # Can't go back on yourself
    if direction == OPPOSITE_DIRECTIONS[state.direction]:
        return
    state.direction = direction


async def consume_keys(
    mailbox: Mailbox[KeyEvent],
    state: GameState,
    lock: asyncio.Lock,
) -> None:
    """Apply keys from *mailbox* to *state* until cancelled."""
    while True:
        key = await mailbox.get()
        async with lock:
            apply_input(state, key)
