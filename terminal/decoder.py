"""Input decoder: raw terminal bytes -> logical key events.

A byte other than ESC is reported as the matching one-character string.
ESC starts a three-byte cursor sequence (ESC [ A..D) that is collapsed into
a single Arrow event. Incomplete or unknown sequences and transient read
errors are dropped without producing an event.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from terminal.keys import CSI_ARROWS, CSI_MARKER, ESC, KeyEvent

if TYPE_CHECKING:
    from runtime.mailbox import Mailbox

logger = logging.getLogger(__name__)


class ByteSource(Protocol):
    """Anything the decoder can pull raw bytes from."""

    async def read(self, n: int) -> bytes:
        """Return between 1 and n bytes, b"" at end of input, or raise OSError."""
        ...


class MemorySource:
    """ByteSource over a fixed sequence of chunks.

    Each read() hands out at most one chunk (split if larger than n). An
    OSError instance in the sequence is raised instead of returned, which
    lets callers simulate a failing terminal.
    """

    def __init__(self, chunks=()):
        self._chunks: list = [c for c in chunks if not isinstance(c, bytes) or c]

    async def read(self, n: int) -> bytes:
        if not self._chunks:
            return b""
        chunk = self._chunks.pop(0)
        if isinstance(chunk, BaseException):
            raise chunk
        if len(chunk) > n:
            self._chunks.insert(0, chunk[n:])
            chunk = chunk[:n]
        return chunk


async def _read_exact(source: ByteSource, n: int) -> bytes:
    """Keep reading until *n* bytes are collected or input ends."""
    data = b""
    while len(data) < n:
        chunk = await source.read(n - len(data))
        if not chunk:
            break
        data += chunk
    return data


async def read_key(source: ByteSource) -> Optional[KeyEvent]:
    """Read and decode one key from *source*.

    Returns:
        The decoded event, or None when the read failed or the bytes did
        not form a known key.

    Raises:
        EOFError: The source has no more input.
    """
    try:
        first = await source.read(1)
    except OSError as e:
        logger.debug("Discarding failed input read: %s", e)
        return None
    if not first:
        raise EOFError("input closed")

    if first[0] != ESC:
        return chr(first[0])

    try:
        tail = await _read_exact(source, 2)
    except OSError as e:
        logger.debug("Discarding escape sequence after read error: %s", e)
        return None
    if len(tail) != 2:
        logger.debug("Discarding incomplete escape sequence %r", first + tail)
        return None

    if tail[0] != CSI_MARKER or tail[1] not in CSI_ARROWS:
        logger.debug("Ignoring unknown escape sequence %r", first + tail)
        return None
    return CSI_ARROWS[tail[1]]


async def decode_keys(source: ByteSource, mailbox: Mailbox[KeyEvent]) -> None:
    """Decode keys from *source* into *mailbox* until input ends or cancelled.

    Each event is handed over with a blocking put, so a slow consumer
    holds the decoder back rather than letting keys pile up.
    """
    while True:
        try:
            key = await read_key(source)
        except EOFError:
            logger.info("Input stream closed, no more keys")
            return
        if key is not None:
            await mailbox.put(key)

