from __future__ import annotations

import asyncio
import io
import os
import pty
import termios

import pytest

from runtime.mailbox import Mailbox
from terminal.console import HIDE_CURSOR, SHOW_CURSOR, StdinSource, TerminalError, raw_terminal
from terminal.decoder import decode_keys
from terminal.keys import Arrow


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def test_raw_mode_on_non_tty_is_a_terminal_error(pipe) -> None:
    read_fd, _ = pipe
    out = io.StringIO()
    with pytest.raises(TerminalError):
        with raw_terminal(read_fd, out=out):
            pass
    # Nothing was changed, so nothing needs restoring.
    assert out.getvalue() == ""


def test_stdin_source_reads_available_bytes(pipe) -> None:
    read_fd, write_fd = pipe

    async def scenario() -> bytes:
        source = StdinSource(read_fd)
        os.write(write_fd, b"wa")
        return await source.read(3)

    assert asyncio.run(scenario()) == b"wa"


def test_stdin_source_feeds_decoder_until_closed(pipe) -> None:
    read_fd, write_fd = pipe

    async def scenario() -> list:
        mailbox: Mailbox = Mailbox()
        events: list = []

        async def drain() -> None:
            while True:
                events.append(await mailbox.get())

        drainer = asyncio.create_task(drain())
        os.write(write_fd, b"s\x1b[C")
        os.close(write_fd)
        await decode_keys(StdinSource(read_fd), mailbox)
        for _ in range(5):
            await asyncio.sleep(0)
        drainer.cancel()
        await asyncio.gather(drainer, return_exceptions=True)
        return events

    assert asyncio.run(scenario()) == ["s", Arrow.RIGHT]


def test_pending_read_can_be_cancelled(pipe) -> None:
    read_fd, _ = pipe

    async def scenario() -> bool:
        task = asyncio.create_task(StdinSource(read_fd).read(1))
        await asyncio.sleep(0.01)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        # The reader callback is gone, so the fd can be watched again.
        loop = asyncio.get_running_loop()
        return task.cancelled() and not loop.remove_reader(read_fd)

    assert asyncio.run(scenario()) is True


@pytest.fixture
def pty_pair():
    master_fd, slave_fd = pty.openpty()
    yield master_fd, slave_fd
    os.close(master_fd)
    os.close(slave_fd)


def test_raw_mode_is_undone_after_exception(pty_pair) -> None:
    _, slave_fd = pty_pair
    before = termios.tcgetattr(slave_fd)
    out = io.StringIO()

    with pytest.raises(RuntimeError):
        with raw_terminal(slave_fd, out=out):
            assert termios.tcgetattr(slave_fd) != before
            raise RuntimeError("crash mid-game")

    assert termios.tcgetattr(slave_fd) == before
    assert out.getvalue() == HIDE_CURSOR + SHOW_CURSOR


def test_raw_mode_is_undone_when_hiding_cursor_fails(pty_pair) -> None:
    _, slave_fd = pty_pair
    before = termios.tcgetattr(slave_fd)

    class BrokenOnHide(io.StringIO):
        def write(self, s: str) -> int:
            if s == HIDE_CURSOR:
                raise OSError("EIO")
            return super().write(s)

    out = BrokenOnHide()
    with pytest.raises(OSError):
        with raw_terminal(slave_fd, out=out):
            pass

    assert termios.tcgetattr(slave_fd) == before
    assert out.getvalue() == SHOW_CURSOR
