"""Full-frame text rendering of a GameState."""

from __future__ import annotations

import sys
from typing import TextIO

import numpy as np

from game.state import GameState

CLEAR_SCREEN = "\x1b[2J\x1b[H"
# Raw mode turns off output post-processing, so every line needs its own CR.
NEWLINE = "\r\n"

EMPTY, BODY, HEAD, FRUIT = 0, 1, 2, 3

# Two columns per cell keeps the board roughly square.
GLYPHS = {
    EMPTY: "  ",
    BODY: "🟩",
    HEAD: "🟢",
    FRUIT: "🍎",
}


def cell_grid(state: GameState) -> np.ndarray:
    """Convert the state to a (height, width) grid of cell codes.

    Fruit wins over the snake and the head wins over the body, which
    matches checking the fruit first and then the snake head to tail.
    """
    grid = np.full((state.height, state.width), EMPTY, dtype=np.int8)

    for x, y in state.snake[1:]:
        if state.in_bounds((x, y)):
            grid[y, x] = BODY

    if state.snake and state.in_bounds(state.head):
        hx, hy = state.head
        grid[hy, hx] = HEAD

    if state.in_bounds(state.fruit):
        fx, fy = state.fruit
        grid[fy, fx] = FRUIT

    return grid


def render_frame(state: GameState) -> str:
    """Build the bordered board plus the score line as one string."""
    grid = cell_grid(state)
    rule = "──" * state.width

    lines = ["┌" + rule + "┐"]
    for row in grid:
        lines.append("│" + "".join(GLYPHS[int(code)] for code in row) + "│")
    lines.append("└" + rule + "┘")
    lines.append(f"Score: {state.score}")
    return NEWLINE.join(lines) + NEWLINE


class Renderer:
    """Repaints the whole terminal with the current frame."""

    def __init__(self, out: TextIO | None = None):
        self.out = out or sys.stdout

    def draw(self, state: GameState) -> str:
        """Clear the viewport and write the frame for *state*.

        Returns:
            The frame that was written (without the clear sequence)
        """
        frame = render_frame(state)
        self.out.write(CLEAR_SCREEN + frame)
        self.out.flush()
        return frame
