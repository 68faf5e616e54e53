"""Thin platform glue around the controlling terminal."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import termios
import tty
from contextlib import contextmanager
from typing import Iterator, TextIO

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


class TerminalError(RuntimeError):
    """The terminal could not be put into raw mode."""


@contextmanager
def raw_terminal(fd: int | None = None, out: TextIO | None = None) -> Iterator[int]:
    """Put *fd* in raw mode (no echo, no line buffering) for the block.

    The previous mode and the cursor are restored on every way out of the
    block, including exceptions and task cancellation.

    Raises:
        TerminalError: If *fd* is not a terminal or its mode can't be changed
    """
    if fd is None:
        fd = sys.stdin.fileno()
    out = out or sys.stdout

    try:
        saved = termios.tcgetattr(fd)
        tty.setraw(fd)
    except (termios.error, OSError) as e:
        raise TerminalError(f"cannot switch fd {fd} to raw mode: {e}") from e
    logger.debug("Terminal fd %d switched to raw mode", fd)

    try:
        out.write(HIDE_CURSOR)
        out.flush()
        yield fd
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        out.write(SHOW_CURSOR)
        out.flush()
        logger.debug("Terminal fd %d restored", fd)


class StdinSource:
    """Async byte source reading straight from a file descriptor.

    Waits for readability through the event loop and only then calls
    os.read, so the fd stays in blocking mode (it is shared with stdout on
    a tty) and a pending read can be cancelled.
    """

    def __init__(self, fd: int | None = None):
        self.fd = sys.stdin.fileno() if fd is None else fd

    async def _wait_readable(self) -> None:
        loop = asyncio.get_running_loop()
        ready = loop.create_future()

        def _on_readable() -> None:
            if not ready.done():
                ready.set_result(None)

        loop.add_reader(self.fd, _on_readable)
        try:
            await ready
        finally:
            loop.remove_reader(self.fd)

    async def read(self, n: int) -> bytes:
        await self._wait_readable()
        return os.read(self.fd, n)
