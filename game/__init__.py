"""Snake game state, rules and rendering."""

from game.engine import SnakeGame
from game.renderer import Renderer, render_frame
from game.state import Direction, GameState

__all__ = ["SnakeGame", "GameState", "Direction", "Renderer", "render_frame"]
