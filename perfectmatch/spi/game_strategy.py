"""
SPI interface for deduction strategies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Union

from ..contestant import ContestantPair


@dataclass(frozen=True)
class Correct:
    """Truth booth verdict: the pair is a perfect match."""

    pair: ContestantPair


@dataclass(frozen=True)
class Wrong:
    """Truth booth verdict: the pair is not a perfect match."""

    pair: ContestantPair


Feedback = Union[Correct, Wrong]


class GameStrategy(Protocol):
    """
    SPI interface implemented by strategies.
    Drivers only talk to a strategy through these calls.
    """

    # ---- ceremony ----
    def ceremony_pairs(self) -> List[ContestantPair]: ...

    def ceremony_feedback(self, num_right: int, guess: List[ContestantPair]) -> None:
        """
        Receive how many pairs of ``guess`` are perfect matches.
        """

    # ---- truth booth ----
    def send_to_booth(self) -> ContestantPair: ...

    def booth_feedback(self, feedback: Feedback) -> None: ...

    # ---- progress ----
    @property
    def perfect_matches(self) -> List[ContestantPair]: ...

    @property
    def is_solved(self) -> bool: ...
