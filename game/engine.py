import logging
import random
from typing import Optional

from .state import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    DIRECTION_VECTORS,
    Direction,
    GameState,
    Point,
)

logger = logging.getLogger(__name__)

# Random draws tried before falling back to enumerating the free cells.
MAX_SPAWN_ATTEMPTS = 64


class SnakeGame:
    """Snake game engine on a fixed-size board.

    The engine owns a single GameState and is its only writer during a tick.
    The scheduler serialises update() against drawing and key handling.
    """

    def __init__(
        self,
        width: int = BOARD_WIDTH,
        height: int = BOARD_HEIGHT,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the game.

        Args:
            width: Board width in cells
            height: Board height in cells
            rng: Random source for fruit placement (seed it for reproducible runs)
        """
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.state = self.reset()

    def reset(self) -> GameState:
        """Reset the game to its initial state.

        Snake is a single cell at the board centre, facing right, and a
        fruit is placed on a random free cell.

        Returns:
            The fresh GameState
        """
        center = (self.width // 2, self.height // 2)
        self.state = GameState(
            snake=[center],
            fruit=center,
            direction=Direction.RIGHT,
            width=self.width,
            height=self.height,
        )
        self.spawn_fruit()
        return self.state

    def spawn_fruit(self) -> None:
        """Place the fruit on a uniformly random cell not covered by the snake.

        Random draws are retried up to MAX_SPAWN_ATTEMPTS times; after that the
        free cells are enumerated. A board with no free cell is a win.
        """
        state = self.state
        for _ in range(MAX_SPAWN_ATTEMPTS):
            candidate = (self.rng.randrange(self.width), self.rng.randrange(self.height))
            if not state.occupies(candidate):
                state.fruit = candidate
                return

        snake_set = set(state.snake)
        empty_cells = [
            (x, y)
            for x in range(self.width)
            for y in range(self.height)
            if (x, y) not in snake_set
        ]
        if empty_cells:
            state.fruit = self.rng.choice(empty_cells)
            return

        # No empty cells (snake fills board - win condition)
        state.won = True
        state.end("board full")
        logger.info("Board full at score %d", state.score)

    def next_head(self) -> Point:
        """Current head translated one cell in the pending direction."""
        dx, dy = DIRECTION_VECTORS[self.state.direction]
        head_x, head_y = self.state.head
        return head_x + dx, head_y + dy

    def update(self) -> None:
        """Advance the game by one tick.

        Collisions set game_over and leave the rest of the state untouched.
        Once the game is over further calls do nothing.
        """
        state = self.state
        if state.game_over:
            return

        new_head = self.next_head()

        if not state.in_bounds(new_head):
            state.end("wall")
            logger.debug("Hit wall at %s with score %d", new_head, state.score)
            return

        # The tail has not moved yet, so it counts as an obstacle too.
        if state.occupies(new_head):
            state.end("self")
            logger.debug("Hit own body at %s with score %d", new_head, state.score)
            return

        state.snake.insert(0, new_head)

        if new_head == state.fruit:
            state.score += 1
            logger.debug("Ate fruit at %s, score %d", new_head, state.score)
            self.spawn_fruit()
        else:
            state.snake.pop()
