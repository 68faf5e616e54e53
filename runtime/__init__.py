"""Game loop, input handoff and settings."""

from runtime.config import Settings, configure_logging, load_settings
from runtime.mailbox import Mailbox
from runtime.scheduler import Ticker, run_game

__all__ = ["Mailbox", "Settings", "Ticker", "configure_logging", "load_settings", "run_game"]
