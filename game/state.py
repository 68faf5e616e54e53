from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

Point = Tuple[int, int]

BOARD_WIDTH = 60
BOARD_HEIGHT = 40
TICK_RATE = 10  # ticks per second


class Direction(IntEnum):
    """Movement directions."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


# Direction vectors: (dx, dy)
DIRECTION_VECTORS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

OPPOSITE_DIRECTIONS: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


@dataclass
class GameState:
    """Represents the current state of a Snake game."""

    snake: List[Point]  # List of (x, y) tuples, head first
    fruit: Point  # (x, y) position of the fruit
    direction: Direction = Direction.RIGHT  # Applied on the next tick
    score: int = 0
    game_over: bool = False
    won: bool = False  # Snake filled the whole board
    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    end_reason: str = ""  # "wall", "self", "quit", "interrupt" or "board full"

    @property
    def head(self) -> Point:
        return self.snake[0]

    def in_bounds(self, point: Point) -> bool:
        x, y = point
        return 0 <= x < self.width and 0 <= y < self.height

    def occupies(self, point: Point) -> bool:
        """True if any snake cell is at *point*."""
        return point in self.snake

    def end(self, reason: str) -> None:
        """Flip the game-over flag; the first recorded reason sticks."""
        if not self.game_over:
            self.end_reason = reason
        self.game_over = True

    def to_dict(self) -> dict:
        """Convert GameState to a dictionary for logging snapshots."""
        return {
            "snake": [{"x": x, "y": y} for x, y in self.snake],
            "fruit": {"x": self.fruit[0], "y": self.fruit[1]},
            "direction": self.direction.name.lower(),
            "score": self.score,
            "game_over": self.game_over,
            "won": self.won,
            "end_reason": self.end_reason,
            "width": self.width,
            "height": self.height,
        }
