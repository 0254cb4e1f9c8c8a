"""
SPI interface for the oracle that owns the secret pairing.
"""

from __future__ import annotations

from typing import List, Protocol

from ..contestant import ContestantPair
from .game_strategy import Feedback


class Oracle(Protocol):
    def ceremony(self, guess: List[ContestantPair]) -> int:
        """Count of perfect matches contained in ``guess``."""

    def truth_booth(self, guess: ContestantPair) -> Feedback:
        """Ground truth for exactly one pair."""
