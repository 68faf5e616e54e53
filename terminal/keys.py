"""Logical key events produced by the input decoder."""

from __future__ import annotations

from enum import Enum
from typing import Union

ESC = 0x1B
CSI_MARKER = ord("[")


class Arrow(Enum):
    """Cursor keys, decoded from their CSI sequences."""

    UP = "A"
    DOWN = "B"
    RIGHT = "C"
    LEFT = "D"


# Final byte of "ESC [ x" -> arrow
CSI_ARROWS: dict[int, Arrow] = {ord(arrow.value): arrow for arrow in Arrow}

# An arrow, or any other byte as a one-character string.
KeyEvent = Union[Arrow, str]
