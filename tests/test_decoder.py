from __future__ import annotations

import asyncio

import pytest

from runtime.mailbox import Mailbox
from terminal.decoder import MemorySource, decode_keys, read_key
from terminal.keys import Arrow


def decode(*chunks) -> list:
    """Run the decoder over *chunks* and collect every event it emits."""

    async def scenario() -> list:
        mailbox: Mailbox = Mailbox()
        events: list = []

        async def drain() -> None:
            while True:
                events.append(await mailbox.get())

        drainer = asyncio.create_task(drain())
        await decode_keys(MemorySource(chunks), mailbox)
        for _ in range(5):
            await asyncio.sleep(0)
        drainer.cancel()
        await asyncio.gather(drainer, return_exceptions=True)
        return events

    return asyncio.run(scenario())


@pytest.mark.parametrize(
    "final, arrow",
    [(b"A", Arrow.UP), (b"B", Arrow.DOWN), (b"C", Arrow.RIGHT), (b"D", Arrow.LEFT)],
)
def test_csi_sequence_becomes_one_arrow(final: bytes, arrow: Arrow) -> None:
    assert decode(b"\x1b[" + final) == [arrow]


def test_csi_sequence_split_across_reads() -> None:
    assert decode(b"\x1b", b"[", b"A") == [Arrow.UP]
    assert decode(b"\x1b", b"[A") == [Arrow.UP]


def test_plain_bytes_are_emitted_verbatim() -> None:
    assert decode(b"wasd") == ["w", "a", "s", "d"]
    assert decode(b"q") == ["q"]


def test_lone_escape_with_short_read_emits_nothing() -> None:
    assert decode(b"\x1b") == []
    assert decode(b"\x1b[") == []


def test_escape_with_read_error_is_discarded() -> None:
    assert decode(b"\x1b", OSError("EIO"), b"w") == ["w"]
    assert decode(b"\x1b[", OSError("EIO"), b"d") == ["d"]


def test_transient_read_error_is_skipped() -> None:
    assert decode(OSError("EAGAIN"), b"w", OSError("EINTR"), b"\x1b[B") == ["w", Arrow.DOWN]


def test_unknown_escape_sequence_is_dropped() -> None:
    assert decode(b"\x1bOA", b"\x1b[Z", b"s") == ["s"]


def test_mixed_stream() -> None:
    assert decode(b"w\x1b[Dq") == ["w", Arrow.LEFT, "q"]


def test_read_key_raises_eof_on_closed_input() -> None:
    async def scenario() -> None:
        await read_key(MemorySource([]))

    with pytest.raises(EOFError):
        asyncio.run(scenario())


def test_decoder_stalls_until_consumer_drains() -> None:
    async def scenario() -> tuple[bool, bool, list]:
        mailbox: Mailbox = Mailbox()
        task = asyncio.create_task(decode_keys(MemorySource([b"wa"]), mailbox))
        for _ in range(5):
            await asyncio.sleep(0)
        # First key sits in the slot; the decoder is blocked on the second.
        blocked = not task.done() and mailbox.full()
        first = await mailbox.get()
        second = await mailbox.get()
        await task
        return blocked, task.done(), [first, second]

    blocked, done, keys = asyncio.run(scenario())
    assert blocked is True
    assert done is True
    assert keys == ["w", "a"]


def test_decoder_can_be_cancelled_while_blocked() -> None:
    class NeverReady:
        async def read(self, n: int) -> bytes:
            await asyncio.Event().wait()
            return b""

    async def scenario() -> bool:
        task = asyncio.create_task(decode_keys(NeverReady(), Mailbox()))
        await asyncio.sleep(0)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        return task.cancelled()

    assert asyncio.run(scenario()) is True
