"""SPI surface for perfectmatch strategies and oracles."""

from .adapter import ENTRY_POINT_GROUP, discover_strategies, load_strategy, strategy_entry_points
from .game_strategy import Correct, Feedback, GameStrategy, Wrong
from .oracle import Oracle

__all__ = [
    "ENTRY_POINT_GROUP",
    "discover_strategies",
    "load_strategy",
    "strategy_entry_points",
    "Correct",
    "Feedback",
    "GameStrategy",
    "Oracle",
    "Wrong",
]
