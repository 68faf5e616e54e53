"""Game loop: fixed-rate update/draw plus the concurrent input pipeline."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Optional

from game.controls import consume_keys
from game.engine import SnakeGame
from game.renderer import Renderer
from game.state import TICK_RATE, GameState
from runtime.mailbox import Mailbox
from terminal.decoder import ByteSource, decode_keys
from terminal.keys import KeyEvent

logger = logging.getLogger(__name__)

INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Ticker:
    """Fires at a fixed rate measured on the event loop clock.

    Deadlines are spaced exactly *interval* apart, so time spent between
    waits does not push later ticks back. A caller that falls more than a
    whole interval behind skips the missed ticks instead of bursting.
    """

    def __init__(self, interval: float):
        self.interval = interval
        self._deadline: Optional[float] = None

    async def wait(self) -> None:
        loop = asyncio.get_running_loop()
        now = loop.time()
        if self._deadline is None:
            self._deadline = now + self.interval

        delay = self._deadline - now
        if delay > 0:
            await asyncio.sleep(delay)

        self._deadline += self.interval
        now = loop.time()
        if self._deadline <= now:
            self._deadline = now + self.interval


def install_interrupt_handlers(
    loop: asyncio.AbstractEventLoop,
    state: GameState,
) -> list[signal.Signals]:
    """Turn process interrupts into a game over instead of an abrupt exit.

    The handler writes game_over without taking the state lock; the loop
    sees it at its next tick boundary.

    Returns:
        The signals a handler was installed for
    """

    def _interrupt(signum: signal.Signals) -> None:
        logger.info("Received %s, ending game", signum.name)
        state.end("interrupt")

    installed = []
    for signum in INTERRUPT_SIGNALS:
        try:
            loop.add_signal_handler(signum, _interrupt, signum)
        except (NotImplementedError, RuntimeError) as e:
            logger.warning("Cannot listen for %s: %s", signum.name, e)
            continue
        installed.append(signum)
    return installed


async def run_game(
    game: SnakeGame,
    source: ByteSource,
    renderer: Renderer,
    tick_interval: float = 1.0 / TICK_RATE,
    handle_signals: bool = True,
) -> GameState:
    """Run the game until it is over.

    Starts the key decoder and the key consumer as background tasks, then
    calls update() and draw() once per tick under the state lock. The
    game-over flag is polled once per tick. The background tasks are
    cancelled and awaited before returning.

    Args:
        game: Engine holding the state to play
        source: Raw input bytes
        renderer: Frame output
        tick_interval: Seconds between ticks
        handle_signals: Install SIGINT/SIGTERM handlers for the run

    Returns:
        The final GameState
    """
    state = game.state
    lock = asyncio.Lock()
    mailbox: Mailbox[KeyEvent] = Mailbox()
    loop = asyncio.get_running_loop()

    tasks = [
        asyncio.create_task(decode_keys(source, mailbox), name="decode-keys"),
        asyncio.create_task(consume_keys(mailbox, state, lock), name="consume-keys"),
    ]
    signals = install_interrupt_handlers(loop, state) if handle_signals else []
    ticker = Ticker(tick_interval)
    logger.info("Game started on %dx%d board", state.width, state.height)

    try:
        while not state.game_over:
            await ticker.wait()
            async with lock:
                game.update()
                renderer.draw(state)
    finally:
        for signum in signals:
            loop.remove_signal_handler(signum)
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for task, result in zip(tasks, results):
            if isinstance(result, Exception):
                logger.error("Task %s failed: %r", task.get_name(), result)

    logger.info(
        "Game over (%s) with score %d, length %d",
        state.end_reason, state.score, len(state.snake),
    )
    return state
