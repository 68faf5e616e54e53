"""Terminal input decoding and raw-mode handling."""

from terminal.console import StdinSource, TerminalError, raw_terminal
from terminal.decoder import MemorySource, decode_keys, read_key
from terminal.keys import Arrow, KeyEvent

__all__ = [
    "Arrow",
    "KeyEvent",
    "MemorySource",
    "StdinSource",
    "TerminalError",
    "decode_keys",
    "raw_terminal",
    "read_key",
]
